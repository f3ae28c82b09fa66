import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from content.models import Author, Blog, Category, Favorite, slugify_title


@pytest.fixture
def author(db):
    return Author.objects.create(name='Meera')


@pytest.fixture
def categories(db):
    return [Category.objects.create(name=name) for name in ('Recipes', 'Health', 'Farming')]


def used_counts(categories):
    return [Category.objects.get(pk=c.pk).used_count for c in categories]


def new_blog(title, author, **extra):
    return Blog.objects.create(title=title, description='d', content='c', author=author, **extra)


# ─── slugs ───

def test_slugify_title():
    assert slugify_title('Hello, World!  Again', stamp=1718000000000) == 'hello-world-again-1718000000000'


def test_slug_changes_only_with_title(author):
    blog = new_blog('First Post', author)
    slug = blog.slug
    assert slug.startswith('first-post-')

    blog.content = 'edited'
    blog.save()
    assert blog.slug == slug

    blog.title = 'Renamed Post'
    blog.save()
    assert blog.slug.startswith('renamed-post-')


def test_publishing_stamps_published_at(author):
    blog = new_blog('Draft', author)
    assert blog.published_at is None
    blog.status = 'published'
    blog.save()
    assert blog.published_at is not None


# ─── category usage counts ───

def test_used_count_follows_category_changes(author, categories):
    recipes, health, farming = categories
    blog = new_blog('Jaggery', author)

    blog.categories.set([recipes, health])
    assert used_counts(categories) == [1, 1, 0]

    blog.categories.set([health, farming])
    assert used_counts(categories) == [0, 1, 1]

    other = new_blog('Millets', author)
    other.categories.set([health])
    assert used_counts(categories) == [0, 2, 1]

    blog.delete()
    assert used_counts(categories) == [0, 1, 0]


def test_used_count_never_goes_negative(author, categories):
    recipes = categories[0]
    blog = new_blog('Ghee', author)
    blog.categories.add(recipes)
    Category.objects.filter(pk=recipes.pk).update(used_count=0)

    blog.categories.clear()

    assert used_counts([recipes]) == [0]


def test_used_count_via_admin_api(admin_api, author, categories):
    recipes, health, _ = categories
    response = admin_api.post('admin/blogs', {
        'title': 'Seasonal Greens', 'description': 'd', 'content': 'c', 'author': author.id,
        'categories': [recipes.id, health.id],
    })
    assert response.status_code == 201
    assert response.json()['success'] is True
    blog_id = response.json()['data']['id']

    admin_api.patch(f'admin/blogs/{blog_id}', {'categories': [health.id]})
    assert used_counts(categories) == [0, 1, 0]

    admin_api.delete(f'admin/blogs/{blog_id}')
    assert used_counts(categories) == [0, 0, 0]


def test_blog_create_requires_fields(admin_api):
    response = admin_api.post('admin/blogs', {'title': 'Only a title'})
    assert response.status_code == 400
    assert response.json() == {'success': False, 'message': 'Title, description, content and author are required'}


# ─── authors ───

def test_author_with_blogs_cannot_be_deleted(admin_api, author):
    new_blog('Kept', author)

    response = admin_api.delete(f'admin/authors/{author.id}')

    assert response.status_code == 400
    assert response.json()['message'] == 'Cannot delete author. Author has associated blogs.'
    assert Author.objects.filter(pk=author.pk).exists()


def test_author_without_blogs_is_removed_with_image(admin_api, r2_client):
    image = SimpleUploadedFile('meera.png', b'\x89PNG....', content_type='image/png')
    created = admin_api.upload('admin/authors', {'name': 'Meera', 'profileImage': image})
    assert created.status_code == 201
    url = created.json()['data']['profileImage']
    assert url.startswith('https://cdn.example.com/test-bucket/blog-management/authors/')
    key = url.split('/test-bucket/', 1)[1]

    response = admin_api.delete(f"admin/authors/{created.json()['data']['id']}")

    assert response.status_code == 200
    assert not Author.objects.exists()
    r2_client.delete_object.assert_called_once_with(Bucket='test-bucket', Key=key)


def test_rejects_non_media_upload(admin_api):
    text = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
    response = admin_api.upload('admin/authors', {'name': 'Meera', 'profileImage': text})
    assert response.status_code == 400
    assert not Author.objects.exists()


# ─── public ───

def test_public_detail_only_serves_published(anon, author):
    draft = new_blog('Draft', author)
    live  = new_blog('Live', author, status='published')

    assert anon.get(f'public/blogs/{draft.id}').status_code == 404

    response = anon.get(f'public/blogs/{live.id}')
    assert response.status_code == 200
    live.refresh_from_db()
    assert live.views == 1


def test_public_list_hides_drafts(anon, author):
    new_blog('Draft', author)
    new_blog('Live', author, status='published')

    results = anon.get('public/blogs').json()['data']['results']

    assert [b['title'] for b in results] == ['Live']


def test_favorites_filter_needs_login(anon, author):
    response = anon.get('public/blogs', {'favorites': 'true'})
    assert response.status_code == 401


def test_favorite_and_unfavorite(api, user, author):
    blog = new_blog('Loved', author, status='published')

    assert api.post(f'blogs/{blog.id}/favorite').status_code == 200
    api.post(f'blogs/{blog.id}/favorite')
    blog.refresh_from_db()
    assert blog.favorites == 1
    assert Favorite.objects.filter(user=user, blog=blog).count() == 1

    assert api.delete(f'blogs/{blog.id}/favorite').status_code == 200
    assert api.delete(f'blogs/{blog.id}/favorite').status_code == 404
    blog.refresh_from_db()
    assert blog.favorites == 0


def test_contact_form(anon, db):
    response = anon.post('contact', {'fullname': 'Ravi', 'email': 'RAVI@Example.com', 'phonenumber': '9800000000', 'message': 'Hello'})
    assert response.status_code == 201
    assert response.json()['data']['email'] == 'ravi@example.com'
