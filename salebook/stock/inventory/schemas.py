from pydantic import BaseModel


class InventoryOut(BaseModel):
    product_id: str
    product_name: str
    stock: int
    low_stock: int
    is_low_stock: bool
    cost: float
    price: float
    inventory_value: float   # stock x cost
    sale_value: float        # stock x price


class InventoryListOut(BaseModel):
    inventory: list[InventoryOut]
    total_cost_value: float
    total_sale_value: float
