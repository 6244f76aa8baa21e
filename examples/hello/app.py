"""Hello World -- the simplest trellis example.

Compile a template from a string and render it with context variables.

Run:
    python app.py
"""

from trellis import Environment

env = Environment()

# Compile from string
template = env.from_string("Hello, {{ name }}!")

# Render with context
output = template.render(name="World")

# Loops and conditionals are strict: conditions must be bools
report = env.from_string(
    "{% for user in users %}"
    "{{ user.name }}{% if user.admin %} (admin){% endif %}\n"
    "{% endfor %}"
).render(users=[{"name": "Ada", "admin": True}, {"name": "Linus", "admin": False}])


def main() -> None:
    print(output)
    print()

    # Multiple renders with different context
    for name in ["Trellis", "Python"]:
        print(template.render(name=name))
    print()
    print(report, end="")


if __name__ == "__main__":
    main()
