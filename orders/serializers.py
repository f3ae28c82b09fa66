# orders/serializers.py
from catalog.packages import resolve_package
from catalog.serializers import product_summary
from users.serializers import address_to_dict


def resolved_line_package(item):
    """
    The package a line was bought as. Lines carry a snapshot since
    checkout started writing one; older lines are mapped back onto the
    product's current tiers.
    """
    if item.package_snapshot:
        snapshot = dict(item.package_snapshot)
        label = snapshot.pop('quantityLabel', None)
        return {
            'package':       snapshot,
            'quantityLabel': label,
            'quantityIndex': item.quantity_index,
            'packageIndex':  item.package_index,
            'matchReason':   'snapshot',
        }
    tiers = item.product.quantity_details if item.product else []
    return resolve_package(
        tiers,
        item.quantity_index,
        item.package_index,
        price=item.price,
        total_price=item.total_price,
        quantity=item.quantity,
    )


def order_item_to_dict(item):
    resolved = resolved_line_package(item)
    return {
        'id':            item.id,
        'product':       product_summary(item.product) if item.product else None,
        'productName':   item.product_name,
        'quantityIndex': resolved['quantityIndex'],
        'packageIndex':  resolved['packageIndex'],
        'orderedIndex':  {'quantityIndex': item.quantity_index, 'packageIndex': item.package_index},
        'quantity':      item.quantity,
        'price':         item.price,
        'totalPrice':    item.total_price,
        'quantityLabel': resolved['quantityLabel'],
        'package':       resolved['package'],
        'matchReason':   resolved['matchReason'],
    }


def order_to_dict(order):
    return {
        'id':                order.id,
        'userId':            order.user_id,
        'items':             [order_item_to_dict(item) for item in order.items.all()],
        'subtotal':          order.subtotal,
        'couponCode':        order.coupon_code,
        'discountAmount':    order.discount_amount,
        'totalAmount':       order.total_amount,
        'deliveryAddress':   address_to_dict(order.delivery_address) if order.delivery_address else None,
        'status':            order.status,
        'paymentStatus':     order.payment_status,
        'paymentMethod':     order.payment_method,
        'razorpayOrderId':   order.razorpay_order_id,
        'razorpayPaymentId': order.razorpay_payment_id,
        'paymentDate':       order.payment_date,
        'createdAt':         order.created_at,
        'updatedAt':         order.updated_at,
    }
