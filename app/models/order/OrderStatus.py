import enum


class OrderStatus(enum.Enum):
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"

    def next(self) -> "OrderStatus":
        """Processing -> Shipped -> Delivered; Delivered is terminal."""
        if self is OrderStatus.PROCESSING:
            return OrderStatus.SHIPPED
        return OrderStatus.DELIVERED
