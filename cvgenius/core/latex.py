"""
CVGenius • core/latex.py
Turns a rendered CVDocument into a standalone LaTeX article.
All user text goes through tex_escape; URLs through _url_escape.
"""

from __future__ import annotations

import re
from typing import List, Optional

from cvgenius.core import config
from cvgenius.core.renderer import CVDocument, Item, Link, Section
from cvgenius.core.utils import tex_escape


COLOR_SCHEMES = {
    "blue": "2563EB",
    "green": "059669",
    "purple": "7C3AED",
    "red": "DC2626",
    "gray": "4B5563",
    "black": "111827",
}
_HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6})$")

_PREAMBLE = r"""\documentclass[%(points)dpt]{article}
\usepackage[a4paper,margin=0.6in]{geometry}
\usepackage[T1]{fontenc}
\usepackage[utf8]{inputenc}
\usepackage{xcolor}
\definecolor{accent}{HTML}{%(accent)s}
\usepackage[colorlinks=true,urlcolor=accent,linkcolor=accent]{hyperref}
\usepackage{enumitem}
\usepackage{titlesec}
\titleformat{\section}{\large\bfseries}{}{0em}{}[\titlerule]
\titlespacing*{\section}{0pt}{10pt}{6pt}
\setlength{\parindent}{0pt}
\pagenumbering{gobble}
\begin{document}
"""


def accent_color(color_scheme: Optional[str]) -> str:
    if not color_scheme:
        return config.DEFAULT_LINK_COLOR
    m = _HEX_RE.match(color_scheme.strip())
    if m:
        return m.group(1).upper()
    return COLOR_SCHEMES.get(color_scheme.strip().lower(), config.DEFAULT_LINK_COLOR)


def _url_escape(url: str) -> str:
    return re.sub(r"([%#{}\\])", r"\\\1", url)


def _link(link: Link) -> str:
    if link.href:
        return rf"\href{{{_url_escape(link.href)}}}{{{tex_escape(link.label)}}}"
    return tex_escape(link.label)


def _item(item: Item) -> List[str]:
    lines: List[str] = []
    head = rf"\textbf{{{tex_escape(item.title)}}}"
    if item.link:
        head += rf" \quad {{\small {_link(item.link)}}}"
    if item.date_range:
        head += rf" \hfill {{\small {tex_escape(item.date_range)}}}"
    lines.append(head + r"\\")
    if item.subtitle:
        lines.append(rf"{tex_escape(item.subtitle)}\\")
    if item.note:
        lines.append(rf"{{\small {tex_escape(item.note)}}}\\")
    if item.body:
        lines.append(rf"{tex_escape(item.body)}\\")
    if item.bullets:
        lines.append(r"\begin{itemize}[leftmargin=*,itemsep=1pt,topsep=2pt]")
        lines.extend(rf"  \item {tex_escape(b)}" for b in item.bullets)
        lines.append(r"\end{itemize}")
    lines.append(r"\vspace{6pt}")
    return lines


def _section(section: Section) -> List[str]:
    lines = [rf"\section*{{{tex_escape(section.title)}}}"]
    if section.text:
        lines.append(tex_escape(section.text))
    for item in section.items:
        lines.extend(_item(item))
    if section.badges:
        lines.append(r" \textbullet{} ".join(tex_escape(b) for b in section.badges))
    return lines


def render_latex(document: CVDocument) -> str:
    points = config.FONT_SIZE_POINTS.get(document.font_size, config.FONT_SIZE_POINTS["medium"])
    out = [_PREAMBLE % {"points": points, "accent": accent_color(document.color_scheme)}]

    out.append(r"\begin{center}")
    out.append(rf"{{\LARGE\bfseries {tex_escape(document.header.name)}}}\\[4pt]")
    for row in document.header.contact_rows:
        out.append(r" \quad|\quad ".join(_link(c) for c in row) + r"\\")
    out.append(r"\end{center}")

    for section in document.sections:
        out.extend(_section(section))

    out.append(r"\end{document}")
    return "\n".join(out) + "\n"
