"""
Doc Generator Module - Generates a data dictionary (HTML / .docx) from a parsed Schema
"""
import html
from datetime import datetime
from typing import IO, List, Tuple, Union

from docx import Document
from docx.shared import Pt, Cm
from docx.oxml.ns import qn
from docx.oxml import OxmlElement

from .schema_model import Schema, Table, Column

HEADERS = ["Column", "Type", "Length", "Nullable", "Key", "Default", "Notes"]
COLUMN_WIDTHS = [Cm(3.0), Cm(2.5), Cm(1.5), Cm(1.5), Cm(1.5), Cm(2.5), Cm(5.5)]


def _type_and_length(column: Column) -> Tuple[str, str]:
    """
    Split a column type into the type name and length shown in the document
    VARCHAR(50) -> ('VARCHAR', '50'), DECIMAL(10,2) -> ('DECIMAL', '10,2'), INT -> ('INT', '-')
    """
    data_type = column.data_type
    if data_type.size is not None and data_type.scale is not None:
        return data_type.base_type, f"{data_type.size},{data_type.scale}"
    if data_type.size is not None:
        return data_type.base_type, str(data_type.size)
    if data_type.full_type != data_type.base_type:
        # VARCHAR(MAX) 等非数值参数
        return data_type.base_type, data_type.full_type[len(data_type.base_type) + 1:-1]
    return data_type.base_type, '-'


def _key_text(column: Column) -> str:
    keys = []
    if column.is_primary_key:
        keys.append('PK')
    if column.is_foreign_key:
        keys.append('FK')
    if column.is_unique and not column.is_primary_key:
        keys.append('UQ')
    return ','.join(keys) or '-'


def _default_text(column: Column) -> str:
    if column.default_value is None:
        return 'NULL' if column.is_nullable else '-'
    return column.default_value


def _notes_text(column: Column) -> str:
    notes = []
    if column.is_identity:
        notes.append(f"IDENTITY({column.identity_seed},{column.identity_increment})")
    if column.references:
        notes.append(f"→ {column.references.table}.{column.references.column}")
    return '; '.join(notes) or '-'


def _column_rows(table: Table) -> List[List[str]]:
    rows = []
    for column in table.columns.values():
        data_type, length = _type_and_length(column)
        rows.append([
            column.name,
            data_type,
            length,
            'Yes' if column.is_nullable else 'No',
            _key_text(column),
            _default_text(column),
            _notes_text(column),
        ])
    return rows


def _foreign_key_note(table: Table) -> str:
    return "; ".join(
        f"{column.name} → {column.references.table}.{column.references.column}"
        for column in table.columns.values() if column.references
    )


def _set_triple_line_style(table):
    """
    Apply the three-line table style: thick top rule, thin rule under the
    header row, thick bottom rule, no other borders
    """
    def set_border(cell, edge, size):
        tc_pr = cell._tc.get_or_add_tcPr()
        tc_borders = tc_pr.find(qn('w:tcBorders'))
        if tc_borders is None:
            tc_borders = OxmlElement('w:tcBorders')
            tc_pr.append(tc_borders)
        border = OxmlElement(f'w:{edge}')
        border.set(qn('w:val'), 'single')
        border.set(qn('w:sz'), size)
        border.set(qn('w:space'), '0')
        border.set(qn('w:color'), '000000')
        tc_borders.append(border)

    tbl_pr = table._tbl.tblPr
    old_borders = tbl_pr.find(qn('w:tblBorders'))
    if old_borders is not None:
        tbl_pr.remove(old_borders)

    tbl_borders = OxmlElement('w:tblBorders')
    for border_name in ['top', 'left', 'bottom', 'right', 'insideH', 'insideV']:
        border = OxmlElement(f'w:{border_name}')
        border.set(qn('w:val'), 'nil')
        tbl_borders.append(border)
    tbl_pr.append(tbl_borders)

    for cell in table.rows[0].cells:
        set_border(cell, 'top', '12')  # 1.5pt
        set_border(cell, 'bottom', '6')  # 0.75pt
    for cell in table.rows[-1].cells:
        set_border(cell, 'bottom', '12')


def generate_html(schema: Schema) -> str:
    """
    Generate the data dictionary as a standalone HTML document
    """
    css = """
    <style>
        body { font-family: 'Segoe UI', Arial, sans-serif; color: #1e293b; margin: 2rem; }
        .document-title { text-align: center; font-size: 20pt; }
        .document-info { text-align: center; color: #666; font-size: 10pt; }
        .table-title { text-align: center; font-size: 12pt; margin-top: 2rem; }
        .three-line-table { width: 100%; border-collapse: collapse; font-size: 10.5pt;
                            border-top: 2px solid #000; border-bottom: 2px solid #000; }
        .three-line-table th { border-bottom: 1px solid #000; padding: 6px; }
        .three-line-table td { padding: 6px; text-align: center; }
        .three-line-table td.field-name { text-align: left; font-family: Consolas, monospace; }
        .pk-yes { color: #c0392b; font-weight: bold; }
        .note { font-size: 9pt; color: #666; font-style: italic; }
    </style>
    """

    total_columns = sum(len(table.columns) for table in schema.tables.values())
    parts = [f"""<!DOCTYPE html>
<html>
<head>
    <title>Database Schema</title>
    <meta charset="UTF-8">
    {css}
</head>
<body>
    <h1 class="document-title">Database Schema</h1>
    <p class="document-info">
        Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}<br>
        Tables: {len(schema.tables)} · Columns: {total_columns}
    </p>
"""]

    for idx, (table_name, table) in enumerate(schema.tables.items()):
        parts.append(f'    <h2 class="table-title">Table {idx + 1}: {html.escape(table_name)}</h2>\n')
        parts.append('    <table class="three-line-table">\n        <thead><tr>')
        parts.append(''.join(f'<th>{header}</th>' for header in HEADERS))
        parts.append('</tr></thead>\n        <tbody>\n')

        for row in _column_rows(table):
            key_class = ' class="pk-yes"' if 'PK' in row[4] else ''
            cells = [f'<td class="field-name">{html.escape(row[0])}</td>']
            for i, value in enumerate(row[1:], start=1):
                cell_class = key_class if i == 4 else ''
                cells.append(f'<td{cell_class}>{html.escape(value)}</td>')
            parts.append(f"            <tr>{''.join(cells)}</tr>\n")

        parts.append('        </tbody>\n    </table>\n')

        note = _foreign_key_note(table)
        if note:
            parts.append(f'    <p class="note">Foreign keys: {html.escape(note)}</p>\n')

    parts.append("</body>\n</html>\n")
    return ''.join(parts)


def generate_docx(schema: Schema, filename: Union[str, IO[bytes]]):
    """
    Write the data dictionary as a .docx file (path or binary stream) using three-line tables
    """
    doc = Document()

    title = doc.add_heading('Database Schema', level=0)
    title.alignment = 1  # 居中

    info_para = doc.add_paragraph()
    info_para.alignment = 1
    total_columns = sum(len(table.columns) for table in schema.tables.values())
    info_para.add_run(f'Generated: {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}\n').font.size = Pt(10)
    info_para.add_run(f'Tables: {len(schema.tables)}\n').font.size = Pt(10)
    info_para.add_run(f'Columns: {total_columns}').font.size = Pt(10)

    style = doc.styles['Normal']
    style.font.size = Pt(10.5)

    for idx, (table_name, table) in enumerate(schema.tables.items()):
        heading = doc.add_paragraph(f"Table {idx + 1}: {table_name}")
        heading.alignment = 1
        heading.runs[0].font.bold = True
        heading.runs[0].font.size = Pt(12)

        tbl = doc.add_table(rows=1, cols=len(HEADERS))
        hdr_cells = tbl.rows[0].cells
        for i, header_text in enumerate(HEADERS):
            hdr_cells[i].text = header_text
            for paragraph in hdr_cells[i].paragraphs:
                paragraph.alignment = 1
                for run in paragraph.runs:
                    run.font.bold = True

        for row in _column_rows(table):
            row_cells = tbl.add_row().cells
            for i, value in enumerate(row):
                row_cells[i].text = value
                for paragraph in row_cells[i].paragraphs:
                    # 字段名、类型和说明左对齐，其余居中
                    paragraph.alignment = 0 if i in (0, 1, 6) else 1
                    for run in paragraph.runs:
                        run.font.size = Pt(10)

        _set_triple_line_style(tbl)

        for i, width in enumerate(COLUMN_WIDTHS):
            for row in tbl.rows:
                row.cells[i].width = width
        tbl.autofit = False

        note = _foreign_key_note(table)
        if note:
            note_para = doc.add_paragraph(f"Note: foreign keys {note}")
            note_para.paragraph_format.left_indent = Cm(0.5)
            note_para.runs[0].font.size = Pt(9)
            note_para.runs[0].font.italic = True

        doc.add_paragraph()

        # 每3个表后分页
        if (idx + 1) % 3 == 0 and idx + 1 < len(schema.tables):
            doc.add_page_break()

    doc.save(filename)
