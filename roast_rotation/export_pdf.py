# roast_rotation/export_pdf.py
from __future__ import annotations
import io
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib import colors
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle


def render_board_pdf(day: str, grid_df) -> bytes:
    """One-page duty board for the given day: tasks down, teams across."""
    buf = io.BytesIO()
    page_size = landscape(A4)
    c = canvas.Canvas(buf, pagesize=page_size)

    c.setFont("Helvetica-Bold", 16)
    c.drawString(40, page_size[1] - 40, f"Duty board - {day}")

    data = [["Task"] + [str(col) for col in grid_df.columns]]
    for label, values in grid_df.iterrows():
        data.append([str(label)] + [v or "-" for v in values.tolist()])

    t = Table(data, repeatRows=1)
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ALIGN", (1, 1), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))

    table_w, table_h = t.wrapOn(c, page_size[0] - 80, page_size[1] - 100)
    t.drawOn(c, 40, page_size[1] - 80 - table_h)

    c.showPage()
    c.save()
    return buf.getvalue()
