"""
Tests for the HTML and .docx data dictionaries.
"""
import io

from docx import Document

from ddl_to_er.core import parse_sql
from ddl_to_er.core.doc_generator import generate_html, generate_docx, HEADERS


def test_html_lists_every_table_and_column(shop_ddl):
    html_doc = generate_html(parse_sql(shop_ddl))

    assert html_doc.startswith("<!DOCTYPE html>")
    assert "Table 1: Users" in html_doc
    assert "Table 3: UserProfiles" in html_doc
    assert "Tables: 3" in html_doc
    assert '<td class="field-name">CreatedAt</td>' in html_doc
    assert "<td>DECIMAL</td><td>10,2</td>" in html_doc
    assert "IDENTITY(1,1)" in html_doc
    assert "Foreign keys: UserID → Users.ID" in html_doc


def test_html_escapes_user_text():
    html_doc = generate_html(parse_sql("CREATE TABLE T (a varchar(10) DEFAULT '<b>');"))

    assert "&#x27;&lt;b&gt;&#x27;" in html_doc
    assert "<b>" not in html_doc


def test_docx_to_stream(shop_ddl):
    buffer = io.BytesIO()
    generate_docx(parse_sql(shop_ddl), buffer)
    buffer.seek(0)

    doc = Document(buffer)
    assert len(doc.tables) == 3

    users = doc.tables[0]
    assert [cell.text for cell in users.rows[0].cells] == HEADERS
    assert len(users.rows) == 5
    assert [cell.text for cell in users.rows[1].cells] == ["ID", "INT", "-", "No", "PK", "-", "IDENTITY(1,1)"]

    text = "\n".join(p.text for p in doc.paragraphs)
    assert "Table 2: Orders" in text
    assert "Note: foreign keys UserID → Users.ID" in text


def test_docx_to_path(shop_ddl, tmp_path):
    path = tmp_path / "schema.docx"
    generate_docx(parse_sql(shop_ddl), str(path))

    assert path.exists()
    orders = Document(str(path)).tables[1]
    status_row = [cell.text for cell in orders.rows[4].cells]
    assert status_row == ["Status", "VARCHAR", "20", "No", "-", "'new, unpaid'", "-"]


def test_varchar_max_length_column():
    buffer = io.BytesIO()
    generate_docx(parse_sql("CREATE TABLE N (Body nvarchar(MAX) NULL);"), buffer)
    buffer.seek(0)

    row = [cell.text for cell in Document(buffer).tables[0].rows[1].cells]
    assert row[:5] == ["Body", "NVARCHAR", "MAX", "Yes", "-"]
    assert row[5] == "NULL"
