from jinja2 import Environment, select_autoescape
from markupsafe import Markup

env = Environment(
    autoescape=select_autoescape(default_for_string=True, default=True),
    trim_blocks=True,
    lstrip_blocks=True,
)


def js_string(s):
    """Quote a value as a double-quoted JS string literal."""
    text = str(s).replace('\\', '\\\\').replace('"', '\\"')
    return Markup('"') + Markup.escape(text) + Markup('"')


env.filters['js_string'] = js_string

_cache = {}


def template_parse(template, params):
    t = _cache.get(template)
    if t is None:
        t = _cache[template] = env.from_string(template)
    o = t.render(params)
    return o
