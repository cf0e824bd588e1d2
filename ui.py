"""Small presentational helpers shared by the templates."""

from markupsafe import Markup, escape


def clamp_progress(value):
    return min(max(value, 0), 100)


def render_progress(value, class_name=""):
    """Render a horizontal progress bar filled to ``value`` percent."""
    width = clamp_progress(value)
    classes = "progress " + class_name if class_name else "progress"
    return Markup(
        '<div class="{}" role="progressbar" aria-valuenow="{:g}" aria-valuemin="0" aria-valuemax="100">'
        '<div class="progress-bar" style="width: {:g}%"></div>'
        "</div>"
    ).format(escape(classes), width, width)
