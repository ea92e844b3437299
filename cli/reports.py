#!/usr/bin/env python3

import sys
from datetime import date, datetime, timezone
from cli.formatting import format_amount, format_percentage
from errors import FinansError
from llm import get_extraction_provider
from tools.comparison import compare_months
from tools.dashboard import MONTH_ABBREVIATIONS, available_months, get_dashboard_stats
from tools.insights import get_insights
from tools.periods import Period, SpecificMonth, parse_period, resolve_period
from logger import get_logger

logger = get_logger()


def _month_label(day: date) -> str:
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.year}"


def _parse_month(text: str) -> date:
    selector = parse_period(text)
    if not isinstance(selector, SpecificMonth):
        raise ValueError(f"Expected a month like 2024-02, got '{text}'")
    return selector.month


def cmd_dashboard(args, services):
    """Show the spending summary for a period."""
    try:
        date_range = resolve_period(parse_period(args.period), datetime.now(timezone.utc))
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    stats = get_dashboard_stats(services, date_range)

    logger.info(f"\nSpending {date_range.start} - {date_range.end}")
    logger.info("=" * 60)
    logger.info(f"Total: {format_amount(stats.total_spending)}")
    logger.info(f"Transactions: {stats.transaction_count}")

    if stats.category_breakdown:
        logger.info("\nBy category:")
        for item in stats.category_breakdown:
            logger.info(
                f"  {item.category:<14} {format_amount(item.amount):>18} "
                f"{item.percentage:6.1f}%"
            )

    logger.info("\nLast 6 months:")
    for month in stats.monthly_series:
        logger.info(f"  {month.label} {month.year}  {format_amount(month.amount):>18}")

    if stats.recent_transactions:
        logger.info("\nRecent transactions:")
        for t in stats.recent_transactions:
            logger.info(
                f"  {t.date.date().isoformat()}  {t.description[:36]:<36} "
                f"{format_amount(t.amount, t.currency):>18}"
            )


def cmd_compare(args, services):
    """Compare spending of two calendar months."""
    try:
        month1 = _parse_month(args.month1)
        month2 = _parse_month(args.month2)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    comparison = compare_months(services, month1, month2)

    logger.info(f"\n{_month_label(month1)} vs {_month_label(month2)}")
    logger.info("=" * 80)
    logger.info(
        f"Total: {format_amount(comparison.month1_total)} -> "
        f"{format_amount(comparison.month2_total)} "
        f"({format_percentage(comparison.total_percentage_change)})"
    )

    if not comparison.category_comparisons:
        logger.info("No transactions in either month.")
        return

    logger.info(f"\n{'Category':<14} {'Before':>18} {'After':>18} {'Change':>18} {'%':>8}")
    logger.info("-" * 80)
    for item in comparison.category_comparisons:
        logger.info(
            f"{item.category:<14} {format_amount(item.month1_amount):>18} "
            f"{format_amount(item.month2_amount):>18} "
            f"{format_amount(item.difference):>18} "
            f"{format_percentage(item.percentage_change):>8}"
        )


def cmd_months(args, services):
    """List months that can be selected for reports."""
    for month in available_months(services, datetime.now(timezone.utc)):
        logger.info(f"{month.strftime('%Y-%m')}  {_month_label(month)}")


def cmd_insights(args, services):
    """Ask the AI provider for observations about spending in a period."""
    try:
        date_range = resolve_period(parse_period(args.period), datetime.now(timezone.utc))
        provider = get_extraction_provider(services.config, args.provider)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        insights = get_insights(services, provider, date_range)
    except FinansError as e:
        logger.error(f"Could not generate insights: {e}")
        sys.exit(1)

    if not insights:
        logger.info("No transactions to analyse.")
        return

    logger.info(f"\nInsights {date_range.start} - {date_range.end}")
    logger.info("=" * 60)
    for insight in insights:
        logger.info(f"\n[{insight.type.value}] {insight.title}")
        logger.info(f"  {insight.description}")
        if insight.category:
            logger.info(f"  Category: {insight.category}")
        if insight.amount is not None:
            logger.info(f"  Amount: {format_amount(insight.amount)}")


def setup_parser(subparsers):
    """Setup the dashboard, compare, months and insights commands.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    dashboard_parser = subparsers.add_parser(
        "dashboard",
        help="Spending summary for a period",
        description="Show totals, category breakdown and recent activity",
    )
    dashboard_parser.add_argument(
        "--period",
        default=Period.LAST_MONTH.value,
        help="this-month, last-month, last-3-months, last-6-months, "
        "this-year, last-year or YYYY-MM (default: last-month)",
    )
    dashboard_parser.set_defaults(func=cmd_dashboard)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Compare two months",
        description="Compare spending per category between two months",
    )
    compare_parser.add_argument("month1", help="Baseline month (YYYY-MM)")
    compare_parser.add_argument("month2", help="Month to compare (YYYY-MM)")
    compare_parser.set_defaults(func=cmd_compare)

    months_parser = subparsers.add_parser(
        "months",
        help="List months with transactions",
        description="List months that have transactions, newest first",
    )
    months_parser.set_defaults(func=cmd_months)

    insights_parser = subparsers.add_parser(
        "insights",
        help="AI observations about your spending",
        description="Ask the AI provider for trends, warnings, tips and subscriptions",
    )
    insights_parser.add_argument(
        "--period",
        default=Period.LAST_MONTH.value,
        help="Period to analyse, same values as dashboard (default: last-month)",
    )
    insights_parser.add_argument(
        "--provider",
        choices=["openai", "gemini"],
        help="AI provider (defaults to llm.provider in the config)",
    )
    insights_parser.set_defaults(func=cmd_insights)
