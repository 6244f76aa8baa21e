"""Demo of colored error diagnostics.

Shows how trellis points at the offending source text when rendering
fails, even inside an included template. Colors are enabled when running
in a TTY and respect NO_COLOR.

Run:
    python colored_errors_demo.py
"""

import importlib
import os

from trellis import Environment, TemplateError

# Force colors for this demo (override TTY detection)
os.environ["FORCE_COLOR"] = "1"

# Re-import after setting env var to pick up the change
from trellis.environment import terminal  # noqa: E402

importlib.reload(terminal)

env = Environment()

# A chain: page -> layout -> nav (error here)
env.add_template(
    "nav",
    """<nav>
    <a href="/">Home</a>
    <span>Welcome, {{ user.usernme }}</span>
</nav>""",
)
env.add_template(
    "layout",
    """<body>
    {% include "nav" %}
    <main>{{ content }}</main>
</body>""",
)
page = env.add_template(
    "page",
    """<title>{{ title }}</title>
{% include "layout" %}""",
)

print("=" * 80)
print("COLORED ERROR MESSAGE DEMO")
print("=" * 80)
print()

try:
    page.render(title="Demo", content="Hello World", user={"username": "Alice"})
except TemplateError as e:
    print(e.format_compact())

print()
print("Plain diagnostic (pretty):")
try:
    env.from_string("{% for x in count %}{{ x }}{% endfor %}", name="loop").render(count=3)
except TemplateError as e:
    print(e.pretty())

print("=" * 80)
print("To disable colors, set NO_COLOR=1 environment variable")
