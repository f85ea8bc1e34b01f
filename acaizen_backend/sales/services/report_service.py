# sales/services/report_service.py

"""
======================================================
PATH: sales/services/report_service.py
======================================================
SALES REPORT (pure aggregation over the sales log)

Filters:
- date_range: today | yesterday | week | month  (relative to `now`, local time)
    today      start of today .. end of today
    yesterday  start of yesterday .. end of yesterday
    week       Monday 00:00 .. Sunday 23:59:59.999999
    month      first day 00:00 .. last day 23:59:59.999999
- payment_method: all | cash | credit | debit | pix

Inclusion:
- start <= created_at <= end (inclusive) AND method matches (or "all")

Aggregates:
- count, total, average ticket (0 when there are no sales)
- per-method {count, amount} for all four methods in fixed order, zeros included
- top products by snapshot name: {quantity, revenue}, revenue DESC,
  equal revenue keeps first-encountered order, top 10

build_sales_report() never touches the database and never mutates its input.
load_report_sales() is the only query.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from django.utils import timezone

from sales.models import Sale

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

TOP_PRODUCTS_LIMIT = 10

RANGE_TODAY = "today"
RANGE_YESTERDAY = "yesterday"
RANGE_WEEK = "week"
RANGE_MONTH = "month"
DATE_RANGES = (RANGE_TODAY, RANGE_YESTERDAY, RANGE_WEEK, RANGE_MONTH)

METHOD_ALL = "all"
PAYMENT_FILTERS = (METHOD_ALL, *Sale.PAYMENT_METHODS)

# short labels used by the report (receipts use the long ones)
REPORT_METHOD_LABELS = {
    Sale.PAYMENT_CASH: "Dinheiro",
    Sale.PAYMENT_CREDIT: "Crédito",
    Sale.PAYMENT_DEBIT: "Débito",
    Sale.PAYMENT_PIX: "PIX",
}

RANGE_TITLES = {
    RANGE_TODAY: "Hoje",
    RANGE_YESTERDAY: "Ontem",
    RANGE_WEEK: "Última Semana",
    RANGE_MONTH: "Último Mês",
}


class ReportError(ValueError):
    code = "INVALID_REPORT_FILTER"


def _money(v) -> Decimal:
    return Decimal(str(v if v is not None else "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _attr(obj, name: str, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _items_of(sale) -> list:
    items = _attr(sale, "items") or []
    # related manager on ORM rows, plain list on snapshots
    if hasattr(items, "all"):
        items = items.all()
    return list(items)


# =========================================================
# Value types
# =========================================================
@dataclass(frozen=True)
class PaymentBreakdown:
    method: str
    label: str
    count: int
    amount: Decimal


@dataclass(frozen=True)
class TopProduct:
    name: str
    quantity: int
    revenue: Decimal


@dataclass(frozen=True)
class SalesReport:
    date_range: str
    payment_method: str
    start: datetime
    end: datetime
    total_sales: int
    total_amount: Decimal
    average_ticket: Decimal
    payment_breakdown: tuple[PaymentBreakdown, ...]
    top_products: tuple[TopProduct, ...]

    @property
    def title(self) -> str:
        return f"Relatório de Vendas - {RANGE_TITLES[self.date_range]}"


# =========================================================
# Date windows
# =========================================================
def _start_of_day(day, tz) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min), tz)


def _end_of_day(day, tz) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.max), tz)


def resolve_date_range(date_range: str, *, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """Inclusive [start, end] in the current timezone."""
    if date_range not in DATE_RANGES:
        raise ReportError(f"Período inválido: {date_range}")

    tz = timezone.get_current_timezone()
    moment = now or timezone.now()
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment, tz)
    today = moment.date()

    if date_range == RANGE_YESTERDAY:
        day = today - timedelta(days=1)
        return _start_of_day(day, tz), _end_of_day(day, tz)

    if date_range == RANGE_WEEK:
        monday = today - timedelta(days=today.weekday())
        return _start_of_day(monday, tz), _end_of_day(monday + timedelta(days=6), tz)

    if date_range == RANGE_MONTH:
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return _start_of_day(first, tz), _end_of_day(next_month - timedelta(days=1), tz)

    return _start_of_day(today, tz), _end_of_day(today, tz)


def _check_payment_filter(payment_method: str) -> str:
    if payment_method not in PAYMENT_FILTERS:
        raise ReportError(f"Forma de pagamento inválida: {payment_method}")
    return payment_method


# =========================================================
# Aggregation (pure)
# =========================================================
def build_sales_report(
    sales: Iterable,
    *,
    date_range: str = RANGE_TODAY,
    payment_method: str = METHOD_ALL,
    now: Optional[datetime] = None,
) -> SalesReport:
    start, end = resolve_date_range(date_range, now=now)
    _check_payment_filter(payment_method)

    selected = [
        sale
        for sale in sales
        if start <= _attr(sale, "created_at") <= end
        and (payment_method == METHOD_ALL or _attr(sale, "payment_method") == payment_method)
    ]

    total_amount = sum((Decimal(str(_attr(s, "total_amount") or 0)) for s in selected), ZERO)
    count = len(selected)
    average = total_amount / count if count else ZERO

    by_method = {m: [0, ZERO] for m in Sale.PAYMENT_METHODS}
    for sale in selected:
        bucket = by_method.get(_attr(sale, "payment_method"))
        if bucket is None:
            continue
        bucket[0] += 1
        bucket[1] += Decimal(str(_attr(sale, "total_amount") or 0))

    # dicts keep insertion order; sorted() is stable, so ties stay first-encountered
    per_product: dict[str, list] = {}
    for sale in selected:
        for item in _items_of(sale):
            name = _attr(item, "product_name") or ""
            acc = per_product.setdefault(name, [0, ZERO])
            acc[0] += int(_attr(item, "quantity") or 0)
            acc[1] += Decimal(str(_attr(item, "total_price") or 0))

    ranked = sorted(per_product.items(), key=lambda kv: kv[1][1], reverse=True)

    return SalesReport(
        date_range=date_range,
        payment_method=payment_method,
        start=start,
        end=end,
        total_sales=count,
        total_amount=_money(total_amount),
        average_ticket=_money(average),
        payment_breakdown=tuple(
            PaymentBreakdown(
                method=m,
                label=REPORT_METHOD_LABELS[m],
                count=by_method[m][0],
                amount=_money(by_method[m][1]),
            )
            for m in Sale.PAYMENT_METHODS
        ),
        top_products=tuple(
            TopProduct(name=name, quantity=qty, revenue=_money(revenue))
            for name, (qty, revenue) in ranked[:TOP_PRODUCTS_LIMIT]
        ),
    )


# =========================================================
# Query + export
# =========================================================
def load_report_sales(*, date_range: str, now: Optional[datetime] = None):
    start, end = resolve_date_range(date_range, now=now)
    return (
        Sale.objects.filter(created_at__gte=start, created_at__lte=end)
        .prefetch_related("items")
        .order_by("created_at", "id")
    )


def sales_report_for(
    *,
    date_range: str = RANGE_TODAY,
    payment_method: str = METHOD_ALL,
    now: Optional[datetime] = None,
) -> SalesReport:
    now = now or timezone.now()
    return build_sales_report(
        load_report_sales(date_range=date_range, now=now),
        date_range=date_range,
        payment_method=payment_method,
        now=now,
    )


def _brl_plain(value: Decimal) -> str:
    return f"R$ {_money(value):.2f}"


def export_report_csv(report: SalesReport) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    writer.writerow([report.title])
    writer.writerow([])

    writer.writerow(["Resumo"])
    writer.writerow(["Total de Vendas", report.total_sales])
    writer.writerow(["Valor Total", _brl_plain(report.total_amount)])
    writer.writerow(["Ticket Médio", _brl_plain(report.average_ticket)])
    writer.writerow([])

    writer.writerow(["Formas de Pagamento"])
    writer.writerow(["Método", "Quantidade", "Valor"])
    for row in report.payment_breakdown:
        writer.writerow([row.label, row.count, _brl_plain(row.amount)])
    writer.writerow([])

    writer.writerow(["Produtos Mais Vendidos"])
    writer.writerow(["Produto", "Quantidade", "Faturamento"])
    for product in report.top_products:
        writer.writerow([product.name, product.quantity, _brl_plain(product.revenue)])

    return buf.getvalue()


def report_csv_filename(now_ms: int) -> str:
    return f"relatorio_vendas_acaizen_{now_ms}.csv"
