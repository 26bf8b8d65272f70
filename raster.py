"""Turn a scene graph into pixels (matplotlib) or an SVG document."""

from __future__ import annotations

import io
from xml.sax.saxutils import escape, quoteattr

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import PathPatch, Rectangle
from matplotlib.path import Path

from surface import Node

DPI = 100


def _visible(node: Node) -> bool:
    return node.style.get("opacity", 1) > 0


def _px_to_pt(px: float) -> float:
    return px * 72 / DPI


def _draw_axis(ax, spec, dx: float, dy: float, alpha: float) -> None:
    lo, hi = spec.extent
    size, pad = spec.tick_size, spec.tick_padding
    kw = dict(color=spec.stroke, linewidth=1, alpha=alpha, solid_capstyle="butt")
    font = _px_to_pt(spec.font_size)
    if spec.orient == "bottom":
        ax.plot([dx + lo, dx + lo, dx + hi, dx + hi], [dy + size, dy, dy, dy + size], **kw)
        for pos, label in spec.ticks:
            ax.plot([dx + pos, dx + pos], [dy, dy + size], **kw)
            ax.text(dx + pos, dy + size + pad, label, ha="center", va="top",
                    fontsize=font, alpha=alpha)
    else:
        ax.plot([dx - size, dx, dx, dx - size], [dy + lo, dy + lo, dy + hi, dy + hi], **kw)
        for pos, label in spec.ticks:
            ax.plot([dx - size, dx], [dy + pos, dy + pos], **kw)
            ax.text(dx - size - pad, dy + pos, label, ha="right", va="center",
                    fontsize=font, alpha=alpha)


def _draw(ax, node: Node, dx: float, dy: float, alpha: float) -> None:
    if not _visible(node):
        return
    alpha *= node.style.get("opacity", 1)
    dx += node.translate[0]
    dy += node.translate[1]

    if node.kind == "path":
        geometry = node.attrs["geometry"]
        if geometry:
            mpl_path = geometry.to_mpl_path()
            shifted = Path(mpl_path.vertices + (dx, dy), mpl_path.codes)
            ax.add_patch(PathPatch(shifted, facecolor=node.style["fill"], edgecolor="none",
                                   alpha=alpha))
    elif node.kind == "rect":
        a = node.attrs
        ax.add_patch(Rectangle(
            (dx + a["x"], dy + a["y"]), a["width"], a["height"],
            facecolor=node.style["fill"], edgecolor=node.style.get("stroke") or "none",
            linewidth=1 if node.style.get("stroke") else 0, alpha=alpha,
        ))
    elif node.kind == "text":
        a = node.attrs
        ax.text(dx + a["x"], dy + a["y"], a["text"], ha="left", va="center",
                fontsize=_px_to_pt(node.style.get("font_size", 12)),
                fontweight=node.style.get("weight", "normal"), alpha=alpha)
    elif node.kind == "axis":
        _draw_axis(ax, node.attrs["spec"], dx, dy, alpha)

    for child in node.children:
        _draw(ax, child, dx, dy, alpha)


def _size(node: Node, width: float | None, height: float | None) -> tuple[float, float]:
    width = width or node.attrs.get("width") or 1
    height = height or node.attrs.get("height") or 1
    return float(width), float(height)


def render_png(node: Node, width: float | None = None, height: float | None = None) -> bytes:
    """Rasterise ``node`` at one pixel per scene unit.

    The root's own translate and panel position are ignored, so a detail
    panel renders at its own origin.
    """
    width, height = _size(node, width, height)
    fig = plt.figure(figsize=(width / DPI, height / DPI), dpi=DPI)
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.axis("off")

    for child in node.children:
        _draw(ax, child, 0.0, 0.0, 1.0)

    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=DPI)
    plt.close(fig)
    buf.seek(0)
    return buf.getvalue()


def _svg_axis(spec, out: list[str], indent: str) -> None:
    lo, hi = spec.extent
    s = spec.tick_size
    if spec.orient == "bottom":
        domain = f"M{lo},{s}V0H{hi}V{s}"
    else:
        domain = f"M{-s},{lo}H0V{hi}H{-s}"
    out.append(f'{indent}<path class="domain" stroke="{spec.stroke}" fill="none" d="{domain}"/>')
    for pos, label in spec.ticks:
        if spec.orient == "bottom":
            out.append(
                f'{indent}<g class="tick" transform="translate({pos:g},0)">'
                f'<line stroke="{spec.stroke}" y2="{s}"/>'
                f'<text y="{s + spec.tick_padding}" dy="0.71em" text-anchor="middle" '
                f'font-size="{spec.font_size}">{escape(label)}</text></g>'
            )
        else:
            out.append(
                f'{indent}<g class="tick" transform="translate(0,{pos:g})">'
                f'<line stroke="{spec.stroke}" x2="{-s}"/>'
                f'<text x="{-(s + spec.tick_padding)}" dy="0.32em" text-anchor="end" '
                f'font-size="{spec.font_size}">{escape(label)}</text></g>'
            )


def _svg(node: Node, out: list[str], depth: int) -> None:
    indent = "  " * depth
    opacity = node.style.get("opacity")
    op_attr = f' opacity="{opacity:g}"' if opacity is not None else ""
    tx, ty = node.translate
    transform = f' transform="translate({tx:g},{ty:g})"' if (tx or ty) else ""
    cls = f" class={quoteattr(node.name)}" if node.name else ""

    if node.kind == "path":
        d = node.attrs["geometry"].to_svg()
        out.append(f'{indent}<path{cls} d="{d}" fill="{node.style["fill"]}"{op_attr}/>')
        return
    if node.kind == "rect":
        a = node.attrs
        stroke = node.style.get("stroke")
        stroke_attr = f' stroke="{stroke}"' if stroke else ""
        out.append(
            f'{indent}<rect{cls} x="{a["x"]:g}" y="{a["y"]:g}" width="{a["width"]:g}" '
            f'height="{a["height"]:g}" fill="{node.style["fill"]}"{stroke_attr}/>'
        )
        return
    if node.kind == "text":
        a = node.attrs
        weight = node.style.get("weight", "normal")
        out.append(
            f'{indent}<text x="{a["x"]:g}" y="{a["y"]:g}" dy="0.35em" '
            f'font-size="{node.style.get("font_size", 12)}" font-weight="{weight}">'
            f'{escape(a["text"])}</text>'
        )
        return

    out.append(f"{indent}<g{cls}{transform}{op_attr}>")
    if node.kind == "axis":
        _svg_axis(node.attrs["spec"], out, indent + "  ")
    for child in node.children:
        _svg(child, out, depth + 1)
    out.append(f"{indent}</g>")


def to_svg(node: Node, width: float | None = None, height: float | None = None) -> str:
    """Serialise ``node`` and its children as a standalone SVG document."""
    width, height = _size(node, width, height)
    out = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}" height="{height:g}">'
    ]
    for child in node.children:
        _svg(child, out, 1)
    out.append("</svg>")
    return "\n".join(out)
