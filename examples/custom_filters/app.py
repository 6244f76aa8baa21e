"""Custom filters -- extending trellis with add_filter.

Demonstrates add_filter(), filter arguments after a colon, and
FilterError for rejecting bad input at the filter's position.

Run:
    python app.py
"""

from trellis import Environment, FilterError, TemplateError

env = Environment()


def money(amount, currency="$"):
    """Format amount as currency."""
    if isinstance(amount, bool) or not isinstance(amount, int | float):
        raise FilterError("`money` expected a number")
    return f"{currency}{amount:,.2f}"


def pluralize(n, singular, plural):
    """Return singular or plural form based on count."""
    return singular if n == 1 else plural


def line_total(item):
    return item["price"] * item["qty"]


env.add_filter("money", money)
env.add_filter("pluralize", pluralize)
env.add_filter("line_total", line_total)

template = env.from_string(
    """Invoice ({{ item_count }} {{ item_count | pluralize: "item", "items" }})
{% for item in items %}- {{ item.name | upper }}: {{ item | line_total | money }}
{% endfor %}Total: {{ total | money }} / {{ total | money: "€" }}"""
)

output = template.render(
    total=1234.56,
    item_count=3,
    items=[
        {"name": "Widget A", "price": 19.99, "qty": 2},
        {"name": "Widget B", "price": 5.00, "qty": 1},
    ],
)

try:
    env.from_string("{{ label | money }}").render(label="free")
except TemplateError as exc:
    error_text = exc.pretty()


def main() -> None:
    print(output)
    print(error_text)


if __name__ == "__main__":
    main()
