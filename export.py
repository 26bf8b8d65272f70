import io
import json

import pandas as pd

from stack_layout import Layer, StackLayout


def _layer_to_dataframe(layer: Layer) -> pd.DataFrame:
    """Convert a single layer to a DataFrame."""
    df = pd.DataFrame({
        "date": pd.to_datetime(list(layer.dates)),
        "value": list(layer.values),
        "low": [b.low for b in layer.bands],
        "high": [b.high for b in layer.bands],
    })
    df.insert(0, "category", layer.category)
    return df


def layout_to_frame(layout: StackLayout) -> pd.DataFrame:
    """Combine all layers into one long DataFrame."""
    frames = [_layer_to_dataframe(layer) for layer in layout]
    if not frames:
        return pd.DataFrame(columns=["category", "date", "value", "low", "high"])
    return pd.concat(frames, ignore_index=True)


def to_csv(layout: StackLayout) -> str:
    """Return the stacked layout as CSV text."""
    return layout_to_frame(layout).to_csv(index=False, date_format="%Y-%m-%d")


def to_json(layout: StackLayout) -> str:
    """Return the stacked layout as pretty-printed JSON, one entry per layer."""
    payload = {
        "layers": [
            {
                "category": layer.category,
                "data": [
                    {"date": pd.Timestamp(d).isoformat(), "value": v, "low": b.low, "high": b.high}
                    for d, v, b in zip(layer.dates, layer.values, layer.bands)
                ],
            }
            for layer in layout
        ]
    }
    return json.dumps(payload, indent=2)


def to_excel(layout: StackLayout) -> bytes:
    """Return an Excel workbook with one sheet per category."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for layer in layout:
            sheet_name = layer.category[:31]  # Excel sheet names max 31 chars
            df = _layer_to_dataframe(layer).drop(columns="category")
            df.to_excel(writer, sheet_name=sheet_name, index=False)
    return buf.getvalue()
