# content/views.py
import logging
import os

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.api import api_response, get_or_404, paginate, parse_bool, parse_ids, parse_int, request_data
from core.auth import authenticate, bearer_token
from core.exceptions import ApiError
from core.permissions import authorize
from core.storage import discard, upload_image
from core.uploads import UploadBatch, build_key, validate_upload

from .models import Author, Blog, Category, Contact, Favorite, Topic, STATUS_CHOICES
from .serializers import (
    author_to_dict, blog_summary, blog_to_dict, category_to_dict, contact_to_dict, topic_to_dict,
)

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = {choice for choice, _ in STATUS_CHOICES}
BLOG_STATUSES   = {choice for choice, _ in Blog.STATUS_CHOICES}


# ─────────────────────────────────────────────────────────────
# HELPERS
# ─────────────────────────────────────────────────────────────

def blogs_qs():
    return Blog.objects.select_related('author').prefetch_related('categories', 'topics')


def clean_choice(value, allowed, field):
    if value not in allowed:
        raise ApiError(400, f"Invalid {field}", key='success')
    return value


def resolve_ids(model, raw, field):
    """Parse a list-ish field into existing primary keys, or 400."""
    try:
        ids = {int(pk) for pk in parse_ids(raw)}
    except (TypeError, ValueError):
        raise ApiError(400, f"Invalid {field}", key='success')
    if ids and model.objects.filter(pk__in=ids).count() != len(ids):
        raise ApiError(400, f"Invalid {field}", key='success')
    return ids


def search_filter(queryset, request, *fields):
    search = request.GET.get('search', '').strip()
    if not search:
        return queryset
    condition = Q()
    for field in fields:
        condition |= Q(**{f"{field}__icontains": search})
    return queryset.filter(condition)


def apply_flags(obj, data, *flags):
    """featured / popular / hasNew style booleans, only when present."""
    for key, attr in flags:
        if key in data:
            setattr(obj, attr, parse_bool(data[key]))


def replace_image(obj, attr, request, field, folder, uploads):
    """
    Store request.FILES[field] (if any) on obj.<attr>.
    Returns the URL it replaced so the caller can drop it after saving.
    """
    if field not in request.FILES:
        return None
    old = getattr(obj, attr)
    setattr(obj, attr, uploads.store(request.FILES[field], folder)['url'])
    return old


# ─────────────────────────────────────────────────────────────
# ADMIN / BLOGS
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["GET", "POST"])
@authorize('blog', 'manage')
def admin_blog_collection(request):
    if request.method == 'POST':
        return _create_blog(request)

    blogs = search_filter(blogs_qs(), request, 'title', 'description')
    params = request.GET
    if params.get('status'):
        blogs = blogs.filter(status=params['status'])
    if params.get('featured') == 'true':
        blogs = blogs.filter(featured=True)
    if params.get('popular') == 'true':
        blogs = blogs.filter(popular=True)
    if params.get('category'):
        blogs = blogs.filter(categories__id=parse_int(params['category']))
    if params.get('topic'):
        blogs = blogs.filter(topics__id=parse_int(params['topic']))
    if params.get('author'):
        blogs = blogs.filter(author_id=parse_int(params['author']))

    blogs = blogs.distinct().order_by('order', '-created_at')
    return api_response(paginate(request, blogs, blog_to_dict))


def _create_blog(request):
    data = request_data(request)
    title       = (data.get('title') or '').strip()
    description = (data.get('description') or '').strip()
    content     = data.get('content') or ''

    if not title or not description or not content or not data.get('author'):
        raise ApiError(400, 'Title, description, content and author are required', key='success')

    author = Author.objects.filter(pk=parse_int(data['author'], None)).first()
    if author is None:
        raise ApiError(400, 'Invalid author', key='success')

    category_ids = resolve_ids(Category, data.get('categories'), 'categories')
    topic_ids    = resolve_ids(Topic, data.get('topics'), 'topics')
    status       = clean_choice(data.get('status') or 'draft', BLOG_STATUSES, 'status')

    with UploadBatch() as uploads:
        thumbnail = None
        if 'thumbnail' in request.FILES:
            thumbnail = uploads.store(request.FILES['thumbnail'], 'blog-management/thumbnails')['url']

        with transaction.atomic():
            blog = Blog.objects.create(
                title=title,
                description=description,
                content=content,
                video_link=data.get('videoLink') or None,
                author=author,
                status=status,
                featured=parse_bool(data.get('featured')),
                popular=parse_bool(data.get('popular')),
                order=parse_int(data.get('order'), 0),
                thumbnail=thumbnail,
            )
            blog.categories.set(category_ids)
            blog.topics.set(topic_ids)

    logger.info(f"Blog {blog.id} created: {blog.slug}")
    blog = blogs_qs().get(pk=blog.pk)
    return api_response(blog_to_dict(blog), message='Blog created successfully', status=201, key='success')


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT", "DELETE"])
@authorize('blog', 'manage')
def admin_blog_detail(request, blog_id):
    blog = get_or_404(blogs_qs(), 'Blog not found', key='success', pk=blog_id)

    if request.method == 'GET':
        return api_response(blog_to_dict(blog), key='success')

    if request.method == 'DELETE':
        thumbnail = blog.thumbnail
        blog.delete()
        discard(thumbnail)
        logger.info(f"Blog {blog_id} deleted")
        return api_response(message='Blog deleted successfully', key='success')

    data = request_data(request)
    for key, attr in (('title', 'title'), ('description', 'description'), ('content', 'content'),
                      ('videoLink', 'video_link')):
        if data.get(key):
            setattr(blog, attr, data[key].strip() if attr != 'content' else data[key])
    if data.get('author'):
        author = Author.objects.filter(pk=parse_int(data['author'], None)).first()
        if author is None:
            raise ApiError(400, 'Invalid author', key='success')
        blog.author = author
    if data.get('status'):
        blog.status = clean_choice(data['status'], BLOG_STATUSES, 'status')
    if 'order' in data:
        blog.order = parse_int(data['order'], blog.order)
    apply_flags(blog, data, ('featured', 'featured'), ('popular', 'popular'))

    category_ids = resolve_ids(Category, data['categories'], 'categories') if data.get('categories') else None
    topic_ids    = resolve_ids(Topic, data['topics'], 'topics') if data.get('topics') else None

    with UploadBatch() as uploads:
        old_thumbnail = replace_image(blog, 'thumbnail', request, 'thumbnail', 'blog-management/thumbnails', uploads)
        with transaction.atomic():
            blog.save()
            if category_ids is not None:
                blog.categories.set(category_ids)
            if topic_ids is not None:
                blog.topics.set(topic_ids)

    discard(old_thumbnail)
    blog = blogs_qs().get(pk=blog.pk)
    return api_response(blog_to_dict(blog), message='Blog updated successfully', key='success')


def _toggle_blog(request, blog_id, mutate, message):
    blog = get_or_404(blogs_qs(), 'Blog not found', key='success', pk=blog_id)
    mutate(blog)
    blog.save()
    return api_response(blog_to_dict(blog), message=message(blog), key='success')


@csrf_exempt
@require_http_methods(["PATCH"])
@authorize('blog', 'manage')
def admin_blog_toggle_status(request, blog_id):
    def flip(blog):
        blog.status = 'draft' if blog.status == 'published' else 'published'
    return _toggle_blog(
        request, blog_id, flip,
        lambda b: f"Blog {'published' if b.status == 'published' else 'unpublished'} successfully",
    )


@csrf_exempt
@require_http_methods(["PATCH"])
@authorize('blog', 'manage')
def admin_blog_toggle_featured(request, blog_id):
    def flip(blog):
        blog.featured = not blog.featured
    return _toggle_blog(
        request, blog_id, flip,
        lambda b: f"Blog {'featured' if b.featured else 'unfeatured'} successfully",
    )


@csrf_exempt
@require_http_methods(["PATCH"])
@authorize('blog', 'manage')
def admin_blog_toggle_popular(request, blog_id):
    def flip(blog):
        blog.popular = not blog.popular
    return _toggle_blog(
        request, blog_id, flip,
        lambda b: f"Blog {'marked as popular' if b.popular else 'unmarked as popular'} successfully",
    )


# ─────────────────────────────────────────────────────────────
# ADMIN / AUTHORS
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["GET", "POST"])
@authorize('author', 'manage')
def admin_author_collection(request):
    if request.method == 'GET':
        authors = search_filter(Author.objects.all(), request, 'name')
        if request.GET.get('status'):
            authors = authors.filter(status=request.GET['status'])
        return api_response(paginate(request, authors.order_by('order', '-created_at'), author_to_dict))

    data = request_data(request)
    name = (data.get('name') or '').strip()
    if not name:
        raise ApiError(400, 'Name is required', key='success')
    status = clean_choice(data.get('status') or 'active', ACTIVE_STATUSES, 'status')

    with UploadBatch() as uploads:
        image = None
        if 'profileImage' in request.FILES:
            image = uploads.store(request.FILES['profileImage'], 'blog-management/authors')['url']
        author = Author.objects.create(
            name=name,
            instagram_handle=data.get('instagramHandle') or None,
            description=data.get('description') or None,
            status=status,
            order=parse_int(data.get('order'), 0),
            profile_image=image,
        )

    return api_response(author_to_dict(author), message='Author created successfully', status=201, key='success')


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT", "DELETE"])
@authorize('author', 'manage')
def admin_author_detail(request, author_id):
    author = get_or_404(Author.objects.all(), 'Author not found', key='success', pk=author_id)

    if request.method == 'GET':
        return api_response(author_to_dict(author), key='success')

    if request.method == 'DELETE':
        if author.blogs.exists():
            raise ApiError(400, 'Cannot delete author. Author has associated blogs.', key='success')
        image = author.profile_image
        author.delete()
        discard(image)
        logger.info(f"Author {author_id} deleted")
        return api_response(message='Author deleted successfully', key='success')

    data = request_data(request)
    for key, attr in (('name', 'name'), ('instagramHandle', 'instagram_handle'), ('description', 'description')):
        if data.get(key):
            setattr(author, attr, data[key].strip())
    if data.get('status'):
        author.status = clean_choice(data['status'], ACTIVE_STATUSES, 'status')
    if 'order' in data:
        author.order = parse_int(data['order'], author.order)

    with UploadBatch() as uploads:
        old_image = replace_image(author, 'profile_image', request, 'profileImage', 'blog-management/authors', uploads)
        author.save()

    discard(old_image)
    return api_response(author_to_dict(author), message='Author updated successfully', key='success')


@csrf_exempt
@require_http_methods(["PATCH"])
@authorize('author', 'manage')
def admin_author_toggle_status(request, author_id):
    author = get_or_404(Author.objects.all(), 'Author not found', key='success', pk=author_id)
    author.status = 'inactive' if author.status == 'active' else 'active'
    author.save()
    state = 'activated' if author.status == 'active' else 'deactivated'
    return api_response(author_to_dict(author), message=f'Author {state} successfully', key='success')


# ─────────────────────────────────────────────────────────────
# ADMIN / CATEGORIES
# ─────────────────────────────────────────────────────────────

def _save_category(category):
    try:
        with transaction.atomic():
            category.save()
    except IntegrityError:
        raise ApiError(409, 'Category already exists', key='success')


@csrf_exempt
@require_http_methods(["GET", "POST"])
@authorize('category', 'manage')
def admin_category_collection(request):
    if request.method == 'GET':
        return api_response(paginate(request, _category_listing(request), category_to_dict))

    data = request_data(request)
    name = (data.get('name') or '').strip()
    if not name:
        raise ApiError(400, 'Name is required', key='success')

    category = Category(
        name=name,
        status=clean_choice(data.get('status') or 'active', ACTIVE_STATUSES, 'status'),
        featured=parse_bool(data.get('featured')),
        popular=parse_bool(data.get('popular')),
        has_new=parse_bool(data.get('hasNew')),
        order=parse_int(data.get('order'), 0),
    )
    with UploadBatch() as uploads:
        if 'image' in request.FILES:
            category.image = uploads.store(request.FILES['image'], 'blog-management/categories')['url']
        _save_category(category)

    return api_response(category_to_dict(category), message='Category created successfully', status=201, key='success')


def _category_listing(request):
    categories = search_filter(Category.objects.all(), request, 'name')
    if request.GET.get('status'):
        categories = categories.filter(status=request.GET['status'])
    if request.GET.get('featured') == 'true':
        categories = categories.filter(featured=True)
    if request.GET.get('popular') == 'true':
        categories = categories.filter(popular=True)
    return categories.order_by('order', '-created_at')


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT", "DELETE"])
@authorize('category', 'manage')
def admin_category_detail(request, category_id):
    category = get_or_404(Category.objects.all(), 'Category not found', key='success', pk=category_id)

    if request.method == 'GET':
        return api_response(category_to_dict(category), key='success')

    if request.method == 'DELETE':
        if category.blogs.exists() or category.topics.exists():
            raise ApiError(400, 'Cannot delete category. Category has associated blogs or topics.', key='success')
        image = category.image
        category.delete()
        discard(image)
        logger.info(f"Category {category_id} deleted")
        return api_response(message='Category deleted successfully', key='success')

    data = request_data(request)
    if data.get('name'):
        category.name = data['name'].strip()
    if data.get('status'):
        category.status = clean_choice(data['status'], ACTIVE_STATUSES, 'status')
    if 'order' in data:
        category.order = parse_int(data['order'], category.order)
    apply_flags(category, data, ('featured', 'featured'), ('popular', 'popular'), ('hasNew', 'has_new'))

    with UploadBatch() as uploads:
        old_image = replace_image(category, 'image', request, 'image', 'blog-management/categories', uploads)
        _save_category(category)

    discard(old_image)
    return api_response(category_to_dict(category), message='Category updated successfully', key='success')


# ─────────────────────────────────────────────────────────────
# ADMIN / TOPICS
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["GET", "POST"])
@authorize('topic', 'manage')
def admin_topic_collection(request):
    if request.method == 'GET':
        topics = search_filter(Topic.objects.prefetch_related('categories'), request, 'name')
        params = request.GET
        if params.get('status'):
            topics = topics.filter(status=params['status'])
        if params.get('featured') == 'true':
            topics = topics.filter(featured=True)
        if params.get('popular') == 'true':
            topics = topics.filter(popular=True)
        if params.get('category'):
            topics = topics.filter(categories__id=parse_int(params['category']))
        topics = topics.distinct().order_by('order', '-created_at')
        return api_response(paginate(request, topics, topic_to_dict))

    data = request_data(request)
    name = (data.get('name') or '').strip()
    if not name:
        raise ApiError(400, 'Name is required', key='success')
    category_ids = resolve_ids(Category, data.get('categories'), 'categories')

    with transaction.atomic():
        topic = Topic.objects.create(
            name=name,
            status=clean_choice(data.get('status') or 'active', ACTIVE_STATUSES, 'status'),
            featured=parse_bool(data.get('featured')),
            popular=parse_bool(data.get('popular')),
            order=parse_int(data.get('order'), 0),
        )
        topic.categories.set(category_ids)

    return api_response(topic_to_dict(topic), message='Topic created successfully', status=201, key='success')


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT", "DELETE"])
@authorize('topic', 'manage')
def admin_topic_detail(request, topic_id):
    topic = get_or_404(Topic.objects.prefetch_related('categories'), 'Topic not found', key='success', pk=topic_id)

    if request.method == 'GET':
        return api_response(topic_to_dict(topic), key='success')

    if request.method == 'DELETE':
        if topic.blogs.exists():
            raise ApiError(400, 'Cannot delete topic. Topic has associated blogs.', key='success')
        topic.delete()
        return api_response(message='Topic deleted successfully', key='success')

    data = request_data(request)
    if data.get('name'):
        topic.name = data['name'].strip()
    if data.get('status'):
        topic.status = clean_choice(data['status'], ACTIVE_STATUSES, 'status')
    if 'order' in data:
        topic.order = parse_int(data['order'], topic.order)
    apply_flags(topic, data, ('featured', 'featured'), ('popular', 'popular'))
    category_ids = resolve_ids(Category, data['categories'], 'categories') if data.get('categories') else None

    with transaction.atomic():
        topic.save()
        if category_ids is not None:
            topic.categories.set(category_ids)

    topic = Topic.objects.prefetch_related('categories').get(pk=topic.pk)
    return api_response(topic_to_dict(topic), message='Topic updated successfully', key='success')


# ─────────────────────────────────────────────────────────────
# ADMIN / CONTACTS & MEDIA
# ─────────────────────────────────────────────────────────────

@require_GET
@authorize('contact', 'list')
def admin_contact_list(request):
    contacts = search_filter(Contact.objects.filter(is_deleted=False), request, 'fullname')
    ordering = 'created_at' if request.GET.get('sort') == 'old' else '-created_at'
    return api_response(paginate(request, contacts.order_by(ordering), contact_to_dict))


@csrf_exempt
@require_POST
@authorize('media', 'upload')
def admin_media_upload(request):
    file = request.FILES.get('file')
    if file is None:
        raise ApiError(400, 'No file provided', key='success')
    validate_upload(file)

    is_video = file.content_type.startswith('video/')
    folder   = 'website/videos' if is_video else 'website/images'
    key      = build_key(folder, file.name)
    stored   = upload_image(file.read(), key, file.content_type)

    data = {
        'url':    stored['url'],
        'key':    stored['key'],
        'format': os.path.splitext(file.name)[1].lstrip('.'),
        'size':   file.size,
    }
    message = 'Video uploaded successfully' if is_video else 'Image uploaded successfully'
    return api_response(data, message=message, status=201, key='success')


# ─────────────────────────────────────────────────────────────
# PUBLIC / BLOGS
# ─────────────────────────────────────────────────────────────

def published_blogs():
    return blogs_qs().filter(status='published')


@require_GET
def public_blog_list(request):
    blogs  = search_filter(published_blogs(), request, 'title', 'description')
    params = request.GET
    if params.get('category'):
        blogs = blogs.filter(categories__id=parse_int(params['category']))
    if params.get('topic'):
        blogs = blogs.filter(topics__id=parse_int(params['topic']))
    if params.get('author'):
        blogs = blogs.filter(author_id=parse_int(params['author']))
    if params.get('featured') == 'true':
        blogs = blogs.filter(featured=True)
    if params.get('popular') == 'true':
        blogs = blogs.filter(popular=True)

    if params.get('favorites') == 'true':
        if not bearer_token(request):
            raise ApiError(401, 'Authentication required to filter by favorites')
        user = authenticate(request)
        blogs = blogs.filter(favorited_by__user=user)

    blogs = blogs.distinct().order_by(F('published_at').desc(nulls_last=True), '-created_at')
    return api_response(paginate(request, blogs, blog_summary))


def _published_page(request, **filters):
    blogs = published_blogs().filter(**filters).distinct()
    blogs = blogs.order_by(F('published_at').desc(nulls_last=True), '-created_at')
    return api_response(paginate(request, blogs, blog_summary))


@require_GET
def public_blogs_by_category(request, category_id):
    return _published_page(request, categories__id=category_id)


@require_GET
def public_blogs_by_topic(request, topic_id):
    return _published_page(request, topics__id=topic_id)


@require_GET
def public_blogs_by_author(request, author_id):
    return _published_page(request, author_id=author_id)


@require_GET
def public_featured_blogs(request):
    limit = max(parse_int(request.GET.get('limit'), 5), 1)
    blogs = published_blogs().filter(featured=True).order_by(F('published_at').desc(nulls_last=True))[:limit]
    return api_response([blog_summary(b) for b in blogs])


@require_GET
def public_popular_blogs(request):
    limit = max(parse_int(request.GET.get('limit'), 5), 1)
    blogs = published_blogs().filter(popular=True).order_by('-views', F('published_at').desc(nulls_last=True))[:limit]
    return api_response([blog_summary(b) for b in blogs])


@require_GET
def public_blog_detail(request, blog_id):
    updated = Blog.objects.filter(pk=blog_id, status='published').update(views=F('views') + 1)
    if not updated:
        raise ApiError(404, 'Blog not found', key='success')
    blog = blogs_qs().get(pk=blog_id)
    return api_response(blog_to_dict(blog), key='success')


# ─────────────────────────────────────────────────────────────
# PUBLIC / CATEGORIES
# ─────────────────────────────────────────────────────────────

@require_GET
def public_category_list(request):
    categories = _category_listing(request).filter(status='active')
    return api_response(paginate(request, categories, category_to_dict))


@require_GET
def public_featured_categories(request):
    limit = max(parse_int(request.GET.get('limit'), 10), 1)
    categories = Category.objects.filter(status='active', featured=True).order_by('order', '-used_count')[:limit]
    return api_response([category_to_dict(c) for c in categories])


@require_GET
def public_popular_categories(request):
    limit = max(parse_int(request.GET.get('limit'), 10), 1)
    categories = Category.objects.filter(status='active', popular=True).order_by('-used_count', 'order')[:limit]
    return api_response([category_to_dict(c) for c in categories])


# ─────────────────────────────────────────────────────────────
# FAVORITES
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["POST", "DELETE"])
@authorize('favorite', 'manage')
def blog_favorite(request, blog_id):
    blog = get_or_404(Blog.objects.all(), 'Blog not found', pk=blog_id)

    if request.method == 'POST':
        with transaction.atomic():
            _, created = Favorite.objects.get_or_create(user=request.user, blog=blog)
            if created:
                Blog.objects.filter(pk=blog.pk).update(favorites=F('favorites') + 1)
        return api_response(message='Blog marked as favorite')

    with transaction.atomic():
        deleted, _ = Favorite.objects.filter(user=request.user, blog=blog).delete()
        if not deleted:
            raise ApiError(404, 'Favorite not found')
        Blog.objects.filter(pk=blog.pk, favorites__gt=0).update(favorites=F('favorites') - 1)
    return api_response(message='Blog removed from favorites')


@require_GET
@authorize('favorite', 'manage')
def my_favorites(request):
    favorites = (
        Favorite.objects.filter(user=request.user)
        .select_related('blog__author')
        .prefetch_related('blog__categories', 'blog__topics')
        .order_by('-created_at')
    )
    return api_response(paginate(request, favorites, lambda fav: blog_summary(fav.blog)))


# ─────────────────────────────────────────────────────────────
# CONTACT
# ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_POST
def contact_create(request):
    data   = request_data(request)
    fields = {name: str(data.get(name) or '').strip() for name in ('fullname', 'email', 'phonenumber', 'message')}
    if not all(fields.values()):
        raise ApiError(400, 'All fields are required', key='success')

    contact = Contact.objects.create(**fields)
    return api_response(contact_to_dict(contact), message='Contact query submitted successfully', status=201, key='success')
