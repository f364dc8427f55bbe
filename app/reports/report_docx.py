from docx import Document


def generate_report_docx(report: dict, file_path: str):
    doc = Document()

    # Title
    doc.add_heading(report["title"], level=1)
    doc.add_heading(f"Your Best Match: {report['match_name']}", level=2)

    # Summary
    doc.add_heading("Summary", level=2)
    for line in report["summary"]:
        doc.add_paragraph(line)

    # Comparison
    doc.add_heading("Category Comparison", level=2)
    table = doc.add_table(rows=1, cols=3)
    header = table.rows[0].cells
    header[0].text = "Category"
    header[1].text = "You"
    header[2].text = report["match_name"]
    for row in report["comparison"]:
        cells = table.add_row().cells
        cells[0].text = row["category"]
        cells[1].text = str(row["user"])
        cells[2].text = str(row["delegate"])

    # History
    doc.add_heading("Quiz History", level=2)
    for entry in report["history"]:
        doc.add_paragraph(
            f"{entry['date']}: Matched with {entry['match_name']}",
            style="List Bullet",
        )

    doc.save(file_path)
