import os
from io import BytesIO

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.pop("MONGO_URI", None)


def build_pdf(lines):
    from reportlab.lib.pagesizes import LETTER
    from reportlab.pdfgen import canvas

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=LETTER)
    y = 720
    for line in lines:
        c.drawString(72, y, line)
        y -= 18
    c.showPage()
    c.save()
    return buf.getvalue()


def build_png():
    from PIL import Image

    buf = BytesIO()
    Image.new("RGB", (64, 32), "white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def resume_pdf():
    return build_pdf(["Experienced React and Node developer, also knows SQL."])


@pytest.fixture
def resume_png():
    return build_png()
