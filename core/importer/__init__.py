"""
Yahoo auction import: pipeline, reconciliation and maintenance jobs.

Usage:
    from core.importer import YahooImportPipeline
    from core.models import ImportRequest

    response = pipeline.run(ImportRequest(url=url, translate=False))
"""

from core.importer.reconcile import (
    ReconcileOutcome,
    Reconciler,
    external_id_for,
    find_existing_product,
    generate_sku,
    handle_for,
)
from core.importer.pipeline import YahooImportPipeline, default_translator
from core.importer.maintenance import fix_sales_channel_stock_links, fix_yahoo_inventory

__all__ = [
    "ReconcileOutcome",
    "Reconciler",
    "external_id_for",
    "find_existing_product",
    "generate_sku",
    "handle_for",
    "YahooImportPipeline",
    "default_translator",
    "fix_sales_channel_stock_links",
    "fix_yahoo_inventory",
]
