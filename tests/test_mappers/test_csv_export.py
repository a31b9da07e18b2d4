import csv
import io

from leadhunter.mappers.csv_export import CSV_HEADERS, leads_to_csv
from leadhunter.mappers.lead_sanitizer import sanitize_lead


def test_empty_export_has_header_only():
    assert leads_to_csv([]) == '"Nome","Telefone","Instagram","Site","Descrição"\n'


def test_export_escapes_quotes_and_newlines():
    lead = sanitize_lead({
        "name": 'Bar "do Zé"',
        "phone": "(11) 98765-4321",
        "website": "https://bardoze.com.br",
        "description": "Linha 1\nLinha 2, com vírgula",
    })
    rows = list(csv.reader(io.StringIO(leads_to_csv([lead]))))
    assert tuple(rows[0]) == CSV_HEADERS
    assert rows[1] == [
        'Bar "do Zé"',
        "(11) 98765-4321",
        "",
        "https://bardoze.com.br",
        "Linha 1\nLinha 2, com vírgula",
    ]
