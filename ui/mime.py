"""
MIME bundle and ANSI text to HTML conversion for output records.
"""
import html
import json
import re
from typing import Callable, Dict, List, Optional, Tuple

ANSI_PATTERN = re.compile(r'(\x1b\[[0-9;]*m)')

ANSI_COLORS = {
    '30': '#000', '31': '#c00', '32': '#0a0', '33': '#a50',
    '34': '#00a', '35': '#a0a', '36': '#0aa', '37': '#aaa',
    '90': '#555', '91': '#f55', '92': '#5f5', '93': '#ff5',
    '94': '#55f', '95': '#f5f', '96': '#5ff', '97': '#fff',
}
ANSI_BG_COLORS = {
    '40': '#000', '41': '#c00', '42': '#0a0', '43': '#a50',
    '44': '#00a', '45': '#a0a', '46': '#0aa', '47': '#aaa',
}


def _image(mimetype: str) -> Callable[[object, dict], str]:
    def render(value, metadata: dict) -> str:
        style = ';'.join(
            f'{dim}:{metadata[dim]}px' for dim in ('width', 'height') if metadata.get(dim)
        )
        style_attr = f' style="{style}"' if style else ''
        return f'<img class="mime-image" src="data:{mimetype};base64,{value}"{style_attr} />'
    return render


# Highest priority first. HTML and SVG are trusted (user code, as in Jupyter).
MIME_RENDERERS: List[Tuple[str, Callable[[object, dict], str]]] = [
    ('text/html', lambda v, m: f'<div class="mime-html">{v}</div>'),
    ('image/svg+xml', lambda v, m: f'<div class="mime-svg">{v}</div>'),
    ('image/png', _image('image/png')),
    ('image/jpeg', _image('image/jpeg')),
    ('image/gif', _image('image/gif')),
    ('text/markdown', lambda v, m: f'<div class="mime-markdown">{v}</div>'),
    ('text/latex', lambda v, m: f'<div class="mime-latex">{html.escape(v)}</div>'),
    ('application/json',
     lambda v, m: f'<pre class="mime-json">{html.escape(json.dumps(v, indent=2))}</pre>'),
    ('text/plain', lambda v, m: f'<pre class="mime-text">{ansi_to_html(v)}</pre>'),
]


def render_mime_bundle(data: Dict[str, object], metadata: Optional[dict] = None) -> str:
    """
    Convert a Jupyter MIME bundle to HTML using the richest known type.

    Args:
        data: Dict with MIME types as keys and content as values
        metadata: Optional rendering hints (width, height)

    Returns:
        HTML string
    """
    metadata = metadata or {}
    for mimetype, render in MIME_RENDERERS:
        if mimetype in data:
            return render(data[mimetype], metadata)
    return f'<pre class="mime-unknown">{html.escape(str(data))}</pre>'


def ansi_to_html(text: str) -> str:
    """
    Convert ANSI escape codes to HTML spans with inline styles.

    Handles colors (30-37, 90-97), backgrounds (40-47), bold (1) and
    reset (0). Everything else is escaped.
    """
    result = []
    open_spans = 0

    for part in ANSI_PATTERN.split(text):
        match = ANSI_PATTERN.fullmatch(part)
        if not match:
            result.append(html.escape(part))
            continue
        for code in part[2:-1].split(';'):
            if code in ('0', ''):
                result.append('</span>' * open_spans)
                open_spans = 0
                continue
            if code == '1':
                style = 'font-weight:bold'
            elif code in ANSI_COLORS:
                style = f'color:{ANSI_COLORS[code]}'
            elif code in ANSI_BG_COLORS:
                style = f'background:{ANSI_BG_COLORS[code]}'
            else:
                continue
            result.append(f'<span style="{style}">')
            open_spans += 1

    result.append('</span>' * open_spans)
    return ''.join(result)
