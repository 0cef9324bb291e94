from enum import Enum


class InventoryCategory(str, Enum):

    feed = "feed"
    medication = "medication"
    equipment = "equipment"
    supplies = "supplies"
    other = "other"


class TransactionType(str, Enum):

    purchase = "purchase"
    restock = "restock"
    usage = "usage"
    adjustment = "adjustment"
    loss = "loss"


# Types that add stock. Adjustment is an additive correction, never a debit.
INCREASING_TRANSACTION_TYPES = {
    TransactionType.purchase,
    TransactionType.restock,
    TransactionType.adjustment,
}

DECREASING_TRANSACTION_TYPES = {
    TransactionType.usage,
    TransactionType.loss,
}


class InventoryUnit(str, Enum):

    bales = "bales"
    barrels = "barrels"
    bunches = "bunches"
    bushels = "bushels"
    dozen = "dozen"
    grams = "grams"
    head = "head"
    kilograms = "kilograms"
    kiloliter = "kiloliter"
    liter = "liter"
    milliliter = "milliliter"
    quantity = "quantity"
    tonnes = "tonnes"


DEFAULT_INVENTORY_UNIT = InventoryUnit.kilograms


class SortOrder(str, Enum):

    asc = "asc"
    desc = "desc"
