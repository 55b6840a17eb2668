"""Page Cache: keyed storage with path-wide invalidation."""

from dashboard.infrastructure.page_cache import PageCache


def test_get_returns_none_for_missing_key():
    assert PageCache().get("/dashboard/invoices") is None


def test_set_then_get():
    cache = PageCache()
    cache.set("/dashboard/invoices", {"invoices": []})
    assert cache.get("/dashboard/invoices") == {"invoices": []}


def test_revalidate_path_drops_every_query_variant():
    cache = PageCache()
    cache.set("/dashboard/invoices", 1)
    cache.set("/dashboard/invoices?query=evil", 2)
    cache.set("/dashboard/invoices?page=2", 3)
    cache.set("/dashboard/customers", 4)

    dropped = cache.revalidate_path("/dashboard/invoices")

    assert dropped == 3
    assert len(cache) == 1
    assert "/dashboard/customers" in cache


def test_revalidate_path_ignores_prefix_matches():
    cache = PageCache()
    cache.set("/dashboard/invoices/abc", 1)
    assert cache.revalidate_path("/dashboard/invoices") == 0
    assert "/dashboard/invoices/abc" in cache


def test_clear_empties_cache():
    cache = PageCache()
    cache.set("/a", 1)
    cache.clear()
    assert len(cache) == 0


# ─── Generations ─────────────────────────────────────────────────


def test_revalidate_path_bumps_generation_for_that_path_only():
    cache = PageCache()
    assert cache.generation("/dashboard/invoices") == 0

    cache.revalidate_path("/dashboard/invoices")

    assert cache.generation("/dashboard/invoices") == 1
    assert cache.generation("/dashboard/customers") == 0


def test_set_if_current_stores_when_path_unchanged():
    cache = PageCache()
    generation = cache.generation("/dashboard/invoices")

    assert cache.set_if_current("/dashboard/invoices?page=2", 1, generation)
    assert cache.get("/dashboard/invoices?page=2") == 1


def test_set_if_current_discards_payload_computed_before_revalidation():
    cache = PageCache()
    generation = cache.generation("/dashboard/invoices")
    cache.revalidate_path("/dashboard/invoices")

    stored = cache.set_if_current("/dashboard/invoices?query=x", "stale", generation)

    assert stored is False
    assert "/dashboard/invoices?query=x" not in cache
