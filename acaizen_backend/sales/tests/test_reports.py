import copy
from datetime import datetime
from decimal import Decimal

from django.test import SimpleTestCase
from django.utils import timezone

from sales.services.report_service import (
    ReportError,
    build_sales_report,
    export_report_csv,
    report_csv_filename,
    resolve_date_range,
)

# Wednesday
NOW = timezone.make_aware(datetime(2024, 5, 8, 15, 0, 0))


def _at(day, hour=12, minute=0, second=0, micro=0):
    return timezone.make_aware(datetime(2024, 5, day, hour, minute, second, micro))


def _sale(created_at, method, total, items):
    return {
        "created_at": created_at,
        "payment_method": method,
        "total_amount": Decimal(total),
        "items": [
            {"product_name": name, "quantity": qty, "total_price": Decimal(price)}
            for name, qty, price in items
        ],
    }


SALES = [
    _sale(_at(8, 9), "cash", "35.80", [("Açaí 300ml", 2, "35.80")]),
    _sale(_at(8, 10), "pix", "20.00", [("Açaí 500ml", 1, "20.00")]),
    _sale(_at(8, 0, 0, 0), "credit", "3.00", [("Água", 1, "3.00")]),
    _sale(_at(8, 23, 59, 59, 999999), "debit", "5.00", [("Refrigerante", 1, "5.00")]),
    _sale(_at(7, 18), "cash", "15.90", [("Açaí 300ml", 1, "15.90")]),
    _sale(_at(6, 0), "pix", "10.00", [("Água", 2, "6.00"), ("Granola extra", 1, "4.00")]),
    _sale(_at(1, 8), "credit", "50.00", [("Açaí 1L", 1, "50.00")]),
    _sale(timezone.make_aware(datetime(2024, 4, 30, 23, 0)), "cash", "99.00", [("Açaí 1L", 2, "99.00")]),
]


class DateRangeTests(SimpleTestCase):
    def test_today_bounds(self):
        start, end = resolve_date_range("today", now=NOW)
        self.assertEqual(start, _at(8, 0))
        self.assertEqual(end, _at(8, 23, 59, 59, 999999))

    def test_yesterday_bounds(self):
        start, end = resolve_date_range("yesterday", now=NOW)
        self.assertEqual(start, _at(7, 0))
        self.assertEqual(end, _at(7, 23, 59, 59, 999999))

    def test_week_starts_monday(self):
        start, end = resolve_date_range("week", now=NOW)
        self.assertEqual(start, _at(6, 0))
        self.assertEqual(end, _at(12, 23, 59, 59, 999999))

    def test_month_bounds(self):
        start, end = resolve_date_range("month", now=NOW)
        self.assertEqual(start, _at(1, 0))
        self.assertEqual(end, _at(31, 23, 59, 59, 999999))

    def test_unknown_range_is_rejected(self):
        with self.assertRaises(ReportError):
            resolve_date_range("year", now=NOW)


class SalesReportTests(SimpleTestCase):
    """
    GUARANTEES:
    - Inclusive date window and payment filter
    - All four methods reported in fixed order, zeros included
    - Top products by revenue, ties in first-seen order, at most 10
    - Pure: same input -> same output, input untouched
    """

    def test_today_summary(self):
        report = build_sales_report(SALES, date_range="today", now=NOW)

        self.assertEqual(report.total_sales, 4)
        self.assertEqual(report.total_amount, Decimal("63.80"))
        self.assertEqual(report.average_ticket, Decimal("15.95"))
        self.assertEqual(report.title, "Relatório de Vendas - Hoje")

    def test_boundaries_are_inclusive(self):
        report = build_sales_report(SALES, date_range="today", payment_method="credit", now=NOW)
        self.assertEqual(report.total_sales, 1)

        report = build_sales_report(SALES, date_range="today", payment_method="debit", now=NOW)
        self.assertEqual(report.total_sales, 1)

    def test_payment_breakdown_has_every_method_in_order(self):
        report = build_sales_report(SALES, date_range="yesterday", now=NOW)

        rows = [(p.method, p.label, p.count, p.amount) for p in report.payment_breakdown]
        self.assertEqual(
            rows,
            [
                ("cash", "Dinheiro", 1, Decimal("15.90")),
                ("credit", "Crédito", 0, Decimal("0.00")),
                ("debit", "Débito", 0, Decimal("0.00")),
                ("pix", "PIX", 0, Decimal("0.00")),
            ],
        )

    def test_empty_window_has_zero_average(self):
        report = build_sales_report([], date_range="month", now=NOW)

        self.assertEqual(report.total_sales, 0)
        self.assertEqual(report.average_ticket, Decimal("0.00"))
        self.assertEqual(report.top_products, ())
        self.assertEqual(len(report.payment_breakdown), 4)

    def test_method_filter(self):
        report = build_sales_report(SALES, date_range="week", payment_method="pix", now=NOW)

        self.assertEqual(report.total_sales, 2)
        self.assertEqual(report.total_amount, Decimal("30.00"))

    def test_top_products_rank_by_revenue(self):
        report = build_sales_report(SALES, date_range="month", now=NOW)

        names = [p.name for p in report.top_products]
        self.assertEqual(names[0], "Açaí 300ml")
        self.assertEqual(report.top_products[0].quantity, 3)
        self.assertEqual(report.top_products[0].revenue, Decimal("51.70"))
        self.assertEqual(names[1], "Açaí 1L")

    def test_equal_revenue_keeps_first_seen_order(self):
        sales = [
            _sale(_at(8, 9), "cash", "10.00", [("B", 1, "5.00"), ("A", 1, "5.00")]),
            _sale(_at(8, 10), "cash", "5.00", [("C", 1, "5.00")]),
        ]

        report = build_sales_report(sales, date_range="today", now=NOW)
        self.assertEqual([p.name for p in report.top_products], ["B", "A", "C"])

    def test_top_products_are_limited_to_ten(self):
        sales = [
            _sale(_at(8, 9), "pix", "1.00", [(f"P{i}", 1, str(i)) for i in range(15)]),
        ]

        report = build_sales_report(sales, date_range="today", now=NOW)
        self.assertEqual(len(report.top_products), 10)
        self.assertEqual(report.top_products[0].name, "P14")

    def test_report_is_pure(self):
        before = copy.deepcopy(SALES)

        first = build_sales_report(SALES, date_range="week", now=NOW)
        second = build_sales_report(SALES, date_range="week", now=NOW)

        self.assertEqual(first, second)
        self.assertEqual(export_report_csv(first), export_report_csv(second))
        self.assertEqual(SALES, before)

    def test_unknown_payment_filter_is_rejected(self):
        with self.assertRaises(ReportError):
            build_sales_report(SALES, payment_method="voucher", now=NOW)


class ReportExportTests(SimpleTestCase):
    def test_csv_sections(self):
        report = build_sales_report(SALES, date_range="today", now=NOW)
        lines = export_report_csv(report).split("\n")

        self.assertEqual(lines[0], "Relatório de Vendas - Hoje")
        self.assertIn("Resumo", lines)
        self.assertIn("Total de Vendas,4", lines)
        self.assertIn("Valor Total,R$ 63.80", lines)
        self.assertIn("Ticket Médio,R$ 15.95", lines)
        self.assertIn("Método,Quantidade,Valor", lines)
        self.assertIn("Dinheiro,1,R$ 35.80", lines)
        self.assertIn("Produto,Quantidade,Faturamento", lines)
        self.assertIn("Açaí 300ml,2,R$ 35.80", lines)

    def test_week_title_and_filename(self):
        report = build_sales_report(SALES, date_range="week", now=NOW)
        self.assertEqual(export_report_csv(report).split("\n")[0], "Relatório de Vendas - Última Semana")
        self.assertEqual(report_csv_filename(123), "relatorio_vendas_acaizen_123.csv")
