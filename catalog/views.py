# catalog/views.py
import logging

from django.db import transaction
from django.db.models import Q
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from core.api import api_response, get_or_404, paginate, parse_bool, parse_ids, parse_int, request_data
from core.exceptions import ApiError
from core.permissions import authorize, authorize_writes
from core.storage import discard
from core.uploads import UploadBatch

from .models import Product, ProductCategory
from .packages import normalize_metadata, normalize_quantity_details
from .serializers import product_category_to_dict, product_to_dict

logger = logging.getLogger(__name__)

PRODUCT_STATUSES = {choice for choice, _ in Product.STATUS_CHOICES}


# ─────────────────────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────────────────────

def products_qs():
    return Product.objects.filter(is_deleted=False).prefetch_related('categories')


def category_ids_from(raw):
    try:
        ids = {int(pk) for pk in parse_ids(raw)}
    except (TypeError, ValueError):
        raise ApiError(400, 'Invalid categories')
    if ids and ProductCategory.objects.filter(pk__in=ids).count() != len(ids):
        raise ApiError(400, 'Invalid categories')
    return ids


def list_field(data, key):
    """quantityDetails / metadata arrive as a list or as a JSON string."""
    value = data.get(key)
    if isinstance(value, list):
        return value
    return parse_ids(value)


def store_product_media(request, uploads):
    """Upload images[] and productVideo if present. Returns (image_urls|None, video_url|None)."""
    image_urls = None
    files = request.FILES.getlist('images')
    if files:
        image_urls = [uploads.store(f, 'products/images')['url'] for f in files]

    video_url = None
    if 'productVideo' in request.FILES:
        video_url = uploads.store(request.FILES['productVideo'], 'products/videos')['url']
    return image_urls, video_url


# ─────────────────────────────────────────────────────────────
# PRODUCTS
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["GET", "POST"])
@authorize_writes('product', 'manage')
def product_collection(request):
    if request.method == 'POST':
        return _create_product(request)

    products = products_qs()
    params   = request.GET
    search   = params.get('search', '').strip()
    if search:
        products = products.filter(Q(name__icontains=search) | Q(description__icontains=search))
    if params.get('status') and params['status'] != 'all':
        products = products.filter(status=params['status'])
    if params.get('category'):
        products = products.filter(categories__id=parse_int(params['category']))
    if params.get('published') == 'true':
        products = products.filter(is_published=True)
    if params.get('popular') == 'true':
        products = products.filter(is_popular=True)
    if params.get('featured') == 'true':
        products = products.filter(is_featured=True)

    ordering = 'created_at' if params.get('sort') == 'old_to_new' else '-created_at'
    products = products.distinct().order_by(ordering, '-id' if ordering.startswith('-') else 'id')
    return api_response(paginate(request, products, product_to_dict))


def _create_product(request):
    data = request_data(request)
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        raise ApiError(400, '`name` is required and must be a non-empty string')

    status = data.get('status') or 'active'
    if status not in PRODUCT_STATUSES:
        raise ApiError(400, 'Invalid status')

    category_ids     = category_ids_from(data.get('categories'))
    quantity_details = normalize_quantity_details(list_field(data, 'quantityDetails'))
    metadata         = normalize_metadata(list_field(data, 'metadata'))

    with UploadBatch() as uploads:
        image_urls, video_url = store_product_media(request, uploads)
        with transaction.atomic():
            product = Product.objects.create(
                name=name.strip(),
                description=data.get('description') or None,
                images=image_urls or [],
                product_video=video_url,
                quantity_details=quantity_details,
                metadata=metadata,
                order=parse_int(data.get('order'), 100),
                is_published=parse_bool(data.get('isPublished')),
                is_popular=parse_bool(data.get('isPopular')),
                is_featured=parse_bool(data.get('isFeatured')),
                status=status,
            )
            product.categories.set(category_ids)

    logger.info(f"Product {product.id} created with {len(quantity_details)} quantity tiers")
    product = products_qs().get(pk=product.pk)
    return api_response(product_to_dict(product), message='Product created successfully', status=201)


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT", "DELETE"])
@authorize_writes('product', 'manage')
def product_detail(request, product_id):
    product = get_or_404(products_qs(), 'Product not found', pk=product_id)

    if request.method == 'GET':
        return api_response(product_to_dict(product))

    if request.method == 'DELETE':
        snapshot = product_to_dict(product)
        media = list(product.images or []) + [product.product_video]
        product.delete()
        for url in media:
            discard(url)
        logger.info(f"Product {product_id} deleted")
        return api_response(snapshot, message='Product deleted successfully')

    data = request_data(request)
    if 'name' in data:
        if not str(data['name'] or '').strip():
            raise ApiError(400, '`name` must be a non-empty string')
        product.name = data['name'].strip()
    if 'description' in data:
        product.description = data['description'] or None
    if 'order' in data:
        product.order = parse_int(data['order'], product.order)
    for key, attr in (('isPublished', 'is_published'), ('isPopular', 'is_popular'), ('isFeatured', 'is_featured')):
        if key in data:
            setattr(product, attr, parse_bool(data[key]))
    if 'status' in data:
        if data['status'] not in PRODUCT_STATUSES:
            raise ApiError(400, 'Invalid status')
        product.status = data['status']
    if 'quantityDetails' in data:
        product.quantity_details = normalize_quantity_details(list_field(data, 'quantityDetails'))
    if 'metadata' in data:
        product.metadata = normalize_metadata(list_field(data, 'metadata'))
    category_ids = category_ids_from(data['categories']) if 'categories' in data else None

    replaced = []
    with UploadBatch() as uploads:
        image_urls, video_url = store_product_media(request, uploads)
        if image_urls is not None:
            replaced.extend(product.images or [])
            product.images = image_urls
        if video_url is not None:
            replaced.append(product.product_video)
            product.product_video = video_url

        with transaction.atomic():
            product.save()
            if category_ids is not None:
                product.categories.set(category_ids)

    for url in replaced:
        discard(url)

    product = products_qs().get(pk=product.pk)
    return api_response(product_to_dict(product), message='Product updated successfully')


@csrf_exempt
@require_http_methods(["PATCH"])
@authorize('product', 'manage')
def product_toggle_status(request, product_id):
    product = get_or_404(products_qs(), 'Product not found', pk=product_id)
    product.status = 'inactive' if product.status == 'active' else 'active'
    product.save(update_fields=['status', 'updated_at'])
    return api_response(product_to_dict(product), message=f'Product is now {product.status}')


# ─────────────────────────────────────────────────────────────
# PRODUCT CATEGORIES
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["GET", "POST"])
@authorize_writes('product_category', 'manage')
def product_category_collection(request):
    if request.method == 'GET':
        categories = ProductCategory.objects.all()
        search = request.GET.get('search', '').strip()
        if search:
            categories = categories.filter(Q(name__icontains=search) | Q(description__icontains=search))
        created = 'created_at' if request.GET.get('sort') == 'old_to_new' else '-created_at'
        categories = categories.order_by('order', created)
        return api_response(paginate(request, categories, product_category_to_dict))

    data        = request_data(request)
    name        = (data.get('name') or '').strip()
    description = (data.get('description') or '').strip()
    if not name or not description:
        raise ApiError(400, 'Name and description are required')

    with UploadBatch() as uploads:
        thumbnail = None
        if 'thumbnail' in request.FILES:
            thumbnail = uploads.store(request.FILES['thumbnail'], 'products/categories')['url']
        category = ProductCategory.objects.create(
            name=name,
            description=description,
            order=parse_int(data.get('order'), 0),
            thumbnail=thumbnail,
        )

    return api_response(product_category_to_dict(category), message='ProductCategory created successfully', status=201)


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT", "DELETE"])
@authorize_writes('product_category', 'manage')
def product_category_detail(request, category_id):
    category = get_or_404(ProductCategory.objects.all(), 'ProductCategory not found', pk=category_id)

    if request.method == 'GET':
        return api_response(product_category_to_dict(category))

    if request.method == 'DELETE':
        thumbnail = category.thumbnail
        category.delete()
        discard(thumbnail)
        return api_response(message='ProductCategory deleted successfully')

    data = request_data(request)
    for key in ('name', 'description'):
        if data.get(key):
            setattr(category, key, data[key].strip())
    if 'order' in data:
        category.order = parse_int(data['order'], category.order)

    old_thumbnail = None
    with UploadBatch() as uploads:
        if 'thumbnail' in request.FILES:
            old_thumbnail = category.thumbnail
            category.thumbnail = uploads.store(request.FILES['thumbnail'], 'products/categories')['url']
        category.save()

    discard(old_thumbnail)
    return api_response(product_category_to_dict(category), message='ProductCategory updated successfully')
