"""Export renderers: plain text, QuickBooks CSV, QuickBooks IIF and import instructions"""

import logging
from typing import List, Optional, Sequence
from enum import Enum
from datetime import datetime, timedelta
from decimal import Decimal

from invoice_creator.config import settings
from invoice_creator.models.document import (
    Document,
    DocumentKind,
    DocumentTotals,
    compute_totals,
)
from invoice_creator.models.money import decimal_to_wire, format_money, quantize_money

logger = logging.getLogger(__name__)

INSTRUCTIONS_FILE_NAME = "QuickBooks_2013-2014_Import_Instructions.txt"

CSV_COLUMNS = (
    "Invoice#", "Customer", "Date", "Item", "Description", "Quantity", "Rate",
    "Amount", "Tax Code", "Tax Amount", "Customer Phone", "Customer Email",
    "Terms", "Due Date", "Memo", "Service Date", "Class", "Rep", "FOB", "Ship Via",
)

# Column order and count below are what QuickBooks 2013/2014 imports; do not reorder
IIF_HDR_HEADER = "!HDR\tPROD\tVER\tREL\tIOTA\tBLD\tDATE\tTIME\tBASIS"
IIF_TRNS_HEADER = (
    "!TRNS\tTRNSTYPE\tDATE\tACCNT\tNAME\tCLASS\tAMOUNT\tDOCNUM\tMEMO\tCLEAR\t"
    "TOPRINT\tNAMETXN\tADDR1\tADDR2\tADDR3\tADDR4\tADDR5\tDUEDATE\tTERMS\tPAID\tSHIPDATE"
)
IIF_SPL_HEADER = (
    "!SPL\tTRNSTYPE\tDATE\tACCNT\tNAME\tCLASS\tAMOUNT\tDOCNUM\tMEMO\tCLEAR\t"
    "QNTY\tPRICE\tINVITEM\tPAIDSTATUS\tTXBL\tTAXCODE\tINVDATE\tPAIDDATE\t"
    "ADDR1\tADDR2\tADDR3\tADDR4\tREIMBEXP\tSERVICEDATE\tOTHER2"
)

TERMS = "Net 30"
SERVICE_CLASS = "Service"
REP = "Mechanic"
SHIP_VIA = "Standard"
RULE = "------------------------"


class ExportFormat(str, Enum):
    """Supported export formats"""
    TEXT = "text"
    CSV = "csv"
    IIF = "iif"
    INSTRUCTIONS = "instructions"


def _csv_quote(value: str) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def _csv_format(field: object) -> str:
    if isinstance(field, str):
        return _csv_quote(field)
    if isinstance(field, Decimal):
        return format(field, "f")
    return str(field)


def _csv_row(fields: Sequence[object]) -> str:
    """str fields are quoted, numbers are written bare"""
    return ",".join(_csv_format(field) for field in fields)


def _iif_field(value: str) -> str:
    # Tabs and newlines would break the record layout
    return (value or "").replace("\t", " ").replace("\r", " ").replace("\n", " ")


class DocumentRenderer:
    """
    Renders a document snapshot into each export format.

    Rendering is pure: the same snapshot and arguments always give the
    same bytes. Only billable (non-empty description) items are written.
    """

    def __init__(
        self,
        tax_rate: Optional[Decimal] = None,
        term_days: Optional[int] = None
    ):
        """
        Args:
            tax_rate: Tax rate (defaults to settings.TAX_RATE)
            term_days: Days until due (defaults to settings.PAYMENT_TERM_DAYS)
        """
        self.tax_rate = Decimal(str(tax_rate if tax_rate is not None else settings.TAX_RATE))
        self.term_days = term_days if term_days is not None else settings.PAYMENT_TERM_DAYS

    def render(
        self,
        document: Document,
        export_format: ExportFormat,
        generated_at: Optional[datetime] = None
    ) -> bytes:
        """
        Render a document to UTF-8 bytes

        Args:
            document: Snapshot of the document
            export_format: Target format
            generated_at: Export timestamp written into the IIF header
                (defaults to the document date at midnight)
        """
        export_format = ExportFormat(export_format)
        if export_format == ExportFormat.TEXT:
            content = self.render_text(document)
        elif export_format == ExportFormat.CSV:
            content = self.render_csv(document)
        elif export_format == ExportFormat.IIF:
            content = self.render_iif(document, generated_at)
        elif export_format == ExportFormat.INSTRUCTIONS:
            content = self.render_instructions(document)
        else:
            raise ValueError(f"Unsupported export format: {export_format}")
        return content.encode("utf-8")

    def totals(self, document: Document) -> DocumentTotals:
        return compute_totals(document, self.tax_rate)

    @property
    def tax_label(self) -> str:
        return f"{decimal_to_wire(self.tax_rate * 100)}%"

    def _due_date(self, document: Document) -> str:
        return (document.date + timedelta(days=self.term_days)).isoformat()

    def render_text(self, document: Document) -> str:
        """Human-readable plain text used for messages and the clipboard"""
        totals = self.totals(document)
        kind = document.kind.value.upper()
        recipient_label = "Quote For" if document.kind == DocumentKind.QUOTE else "Bill To"
        customer = document.customer

        text = f"{kind} {document.number}\n"
        text += f"Date: {document.date.isoformat()}\n\n"
        text += f"{recipient_label}: {customer.name}\n"
        if customer.phone:
            text += f"Phone: {customer.phone}\n"
        if customer.email:
            text += f"Email: {customer.email}\n"
        text += "\nItems:\n"
        text += f"{RULE}\n"

        for item in document.billable_items():
            text += f"{item.description}\n"
            text += (
                f"  Qty: {decimal_to_wire(item.quantity)} × ${format_money(item.unit_price)}"
                f" = ${format_money(item.line_total)}\n"
            )

        text += f"{RULE}\n"
        text += f"Subtotal: ${format_money(totals.subtotal)}\n"
        text += f"Tax ({self.tax_label}): ${format_money(totals.tax)}\n"
        text += f"TOTAL: ${format_money(totals.total)}\n"

        if document.attachments:
            text += f"\nAttachments: {len(document.attachments)} file(s)\n"
            for attachment in document.attachments:
                text += f"- {attachment.name} ({attachment.size_mb}MB)\n"

        return text

    def render_csv(self, document: Document) -> str:
        """QuickBooks 2013/2014 CSV: one row per item plus a TOTAL row"""
        totals = self.totals(document)
        kind = document.kind.value.upper()
        customer = document.customer
        doc_date = document.date.isoformat()
        due_date = self._due_date(document)

        lines: List[str] = [_csv_row(CSV_COLUMNS)]
        for item in document.billable_items():
            line_total = item.line_total
            lines.append(_csv_row([
                document.number,
                customer.name,
                doc_date,
                item.description,
                item.description,
                item.quantity.normalize(),
                item.unit_price.normalize(),
                quantize_money(line_total),
                "Tax",
                quantize_money(line_total * self.tax_rate),
                customer.phone,
                customer.email,
                TERMS,
                due_date,
                f"{kind} - Created with Invoice Creator",
                doc_date,
                SERVICE_CLASS,
                REP,
                "",
                SHIP_VIA,
            ]))

        grand_total = quantize_money(totals.total)
        lines.append(_csv_row([
            document.number,
            customer.name,
            doc_date,
            "TOTAL",
            "Invoice Total",
            1,
            grand_total,
            grand_total,
            "",
            "",
            customer.phone,
            customer.email,
            TERMS,
            due_date,
            f"{kind} Total",
            doc_date,
            SERVICE_CLASS,
            REP,
            "",
            SHIP_VIA,
        ]))
        return "\n".join(lines)

    def render_iif(self, document: Document, generated_at: Optional[datetime] = None) -> str:
        """QuickBooks IIF transaction: TRNS header, one SPL per item, optional tax SPL"""
        totals = self.totals(document)
        kind = document.kind.value.upper()
        customer_name = _iif_field(document.customer.name)
        number = _iif_field(document.number)
        doc_date = document.date.isoformat()
        due_date = self._due_date(document)
        if generated_at is None:
            generated_at = datetime.combine(document.date, datetime.min.time())

        export_date = f"{generated_at.month}/{generated_at.day}/{generated_at.year}"
        export_time = generated_at.strftime("%I:%M:%S %p").lstrip("0")

        lines: List[str] = [
            IIF_HDR_HEADER,
            "\t".join([
                "HDR", "QuickBooks Pro", "2014", "Release", "R1P", "20140101",
                export_date, export_time, "Cash",
            ]),
            IIF_TRNS_HEADER,
            "\t".join([
                "TRNS", "INVOICE", doc_date, "Accounts Receivable", customer_name,
                SERVICE_CLASS, format_money(totals.total), number,
                f"{kind} for {customer_name}", "N", "N", "", "", "", "", "", "",
                due_date, TERMS, "N", "",
            ]),
            IIF_SPL_HEADER,
        ]

        for item in document.billable_items():
            description = _iif_field(item.description)
            lines.append("\t".join([
                "SPL", "INVOICE", doc_date, "Income:Service Income", customer_name,
                SERVICE_CLASS, f"-{format_money(item.line_total)}", number,
                description, "N", decimal_to_wire(item.quantity),
                decimal_to_wire(item.unit_price), description, "Unpaid", "Y", "Tax",
                doc_date, "", "", "", "", "", "", doc_date, "",
            ]))

        if totals.tax > 0:
            tax = format_money(totals.tax)
            lines.append("\t".join([
                "SPL", "INVOICE", doc_date, "Sales Tax Payable", customer_name,
                SERVICE_CLASS, f"-{tax}", number, f"Sales Tax ({self.tax_label})",
                "N", "1", tax, "Tax", "Unpaid", "N", "Tax", doc_date,
                "", "", "", "", "", "", doc_date, "",
            ]))

        lines.append("ENDTRNS")
        return "\n".join(lines)

    def render_instructions(self, document: Document) -> str:
        """Import steps for the CSV and IIF files, specific to this document"""
        totals = self.totals(document)
        number = document.number
        name = document.customer.name
        return f"""QUICKBOOKS 2013/2014 IMPORT INSTRUCTIONS
=========================================

This folder contains files formatted for QuickBooks 2013 and 2014:

1. {number}_QB2014.csv
   - Enhanced CSV format for importing invoice data
   - Use: File > Utilities > Import > Excel Files
   - Compatible with QuickBooks 2013 and 2014 data import
   - Includes additional fields for better data integrity

2. {number}_QB2014.iif
   - Enhanced IIF format for direct invoice import
   - Use: File > Utilities > Import > IIF Files
   - Creates complete invoice transaction with classes and service dates
   - Improved compatibility with QB 2014 features

IMPORT STEPS FOR IIF FILE (RECOMMENDED):
1. Open QuickBooks 2013 or 2014
2. Go to File > Utilities > Import > IIF Files
3. Select the {number}_QB2014.iif file
4. Click Import
5. The invoice will appear in your Invoice list with enhanced data
6. Verify customer and item information

IMPORT STEPS FOR CSV FILE:
1. Open QuickBooks 2013 or 2014
2. Go to File > Utilities > Import > Excel Files
3. Select "Invoices" for invoice data import
4. Follow the import wizard
5. Map the columns to QuickBooks fields:
   - Invoice# → Invoice Number
   - Customer → Customer Name
   - Date → Invoice Date
   - Item → Item Code
   - Description → Description
   - Quantity → Qty
   - Rate → Rate
   - Service Date → Service Date (QB 2014)
   - Class → Class (QB 2014)

NEW FEATURES FOR QUICKBOOKS 2014:
✅ Enhanced service date tracking
✅ Class-based organization (Service)
✅ Improved tax handling
✅ Better customer contact integration
✅ Representative tracking (Mechanic)
✅ Shipping method tracking

NOTES:
- Customer "{name}" may need to be created first
- Tax settings should match your QuickBooks tax setup ({self.tax_label} configured)
- Item codes will be created as "Service Income" items
- Service class will be set to "Service"
- Representative will be set to "Mechanic"
- Invoice date: {document.date.isoformat()}
- Due date: {self.term_days} days from invoice date
- Total amount: ${format_money(totals.total)}
- Payment terms: {TERMS}

TROUBLESHOOTING:
- If import fails, ensure QB is updated to latest version
- Create customer record manually if needed
- Check that Service Income account exists
- Verify tax code setup matches (Tax = {self.tax_label})

For support, refer to QuickBooks Help > Import Data or contact QuickBooks support.
"""


def artifact_file_names(document: Document) -> dict:
    """File name per export format for a document"""
    return {
        ExportFormat.TEXT: f"{document.number}.txt",
        ExportFormat.CSV: f"{document.number}_QB2014.csv",
        ExportFormat.IIF: f"{document.number}_QB2014.iif",
        ExportFormat.INSTRUCTIONS: INSTRUCTIONS_FILE_NAME,
    }
