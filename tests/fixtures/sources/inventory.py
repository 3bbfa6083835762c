"""Inventory helpers."""


def restock(items, threshold):
    for item in items:
        if item.count < threshold and item.active:
            item.count += 10
    return items


def describe(item):
    # NOTE: labels are shown to end users
    if item.count == 0:
        return "empty"
    return "stocked"
