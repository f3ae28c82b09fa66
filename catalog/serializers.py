# catalog/serializers.py

def product_category_to_dict(category, brief=False):
    data = {
        'id':        category.id,
        'name':      category.name,
        'thumbnail': category.thumbnail,
    }
    if brief:
        return data
    data.update({
        'description': category.description,
        'order':       category.order,
        'createdAt':   category.created_at,
        'updatedAt':   category.updated_at,
    })
    return data


def product_summary(product):
    """What carts, wishlists, orders and reviews embed."""
    return {
        'id':     product.id,
        'name':   product.name,
        'images': product.images,
        'status': product.status,
    }


def product_to_dict(product):
    return {
        'id':              product.id,
        'name':            product.name,
        'description':     product.description,
        'images':          product.images,
        'productVideo':    product.product_video,
        'categories':      [product_category_to_dict(c, brief=True) for c in product.categories.all()],
        'quantityDetails': product.quantity_details,
        'metadata':        product.metadata,
        'order':           product.order,
        'isPublished':     product.is_published,
        'isPopular':       product.is_popular,
        'isFeatured':      product.is_featured,
        'status':          product.status,
        'countFavorite':   product.count_favorite,
        'isDeleted':       product.is_deleted,
        'ratingAvg':       product.rating_avg,
        'ratingCount':     product.rating_count,
        'createdAt':       product.created_at,
        'updatedAt':       product.updated_at,
    }
