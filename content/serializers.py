# content/serializers.py

def author_to_dict(author, brief=False):
    data = {
        'id':              author.id,
        'name':            author.name,
        'profileImage':    author.profile_image,
        'instagramHandle': author.instagram_handle,
    }
    if brief:
        return data
    data.update({
        'description': author.description,
        'status':      author.status,
        'order':       author.order,
        'createdAt':   author.created_at,
        'updatedAt':   author.updated_at,
    })
    return data


def category_to_dict(category, brief=False):
    data = {
        'id':    category.id,
        'name':  category.name,
        'image': category.image,
    }
    if brief:
        return data
    data.update({
        'status':    category.status,
        'featured':  category.featured,
        'popular':   category.popular,
        'hasNew':    category.has_new,
        'usedCount': category.used_count,
        'order':     category.order,
        'createdAt': category.created_at,
        'updatedAt': category.updated_at,
    })
    return data


def topic_to_dict(topic, brief=False):
    if brief:
        return {'id': topic.id, 'name': topic.name}
    return {
        'id':         topic.id,
        'name':       topic.name,
        'categories': [category_to_dict(c, brief=True) for c in topic.categories.all()],
        'status':     topic.status,
        'featured':   topic.featured,
        'popular':    topic.popular,
        'order':      topic.order,
        'createdAt':  topic.created_at,
        'updatedAt':  topic.updated_at,
    }


def blog_to_dict(blog, with_content=True):
    data = {
        'id':          blog.id,
        'title':       blog.title,
        'description': blog.description,
        'thumbnail':   blog.thumbnail,
        'videoLink':   blog.video_link,
        'author':      author_to_dict(blog.author, brief=True) if blog.author_id else None,
        'categories':  [category_to_dict(c, brief=True) for c in blog.categories.all()],
        'topics':      [topic_to_dict(t, brief=True) for t in blog.topics.all()],
        'status':      blog.status,
        'featured':    blog.featured,
        'popular':     blog.popular,
        'favorites':   blog.favorites,
        'views':       blog.views,
        'order':       blog.order,
        'publishedAt': blog.published_at,
        'slug':        blog.slug,
        'createdAt':   blog.created_at,
        'updatedAt':   blog.updated_at,
    }
    if with_content:
        data['content'] = blog.content
    return data


def blog_summary(blog):
    return blog_to_dict(blog, with_content=False)


def contact_to_dict(contact):
    return {
        'id':          contact.id,
        'fullname':    contact.fullname,
        'email':       contact.email,
        'phonenumber': contact.phonenumber,
        'message':     contact.message,
        'isDeleted':   contact.is_deleted,
        'createdAt':   contact.created_at,
        'updatedAt':   contact.updated_at,
    }
