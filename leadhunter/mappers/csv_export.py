import csv
import io

from leadhunter.schemas.lead import Lead

CSV_HEADERS = ("Nome", "Telefone", "Instagram", "Site", "Descrição")


def leads_to_csv(leads: list[Lead]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for lead in leads:
        writer.writerow([
            lead.name,
            lead.phone,
            lead.instagram or "",
            lead.website or "",
            lead.description,
        ])
    return buf.getvalue()
