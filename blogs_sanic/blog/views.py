from sanic import exceptions

from blogs_sanic.blueprints import BlogsBlueprint
from .serializers import BlogBodySerializer, BlogSerializer, MessageSerializer, blog_id_params
from .store import BlogStore

blog = BlogsBlueprint('blogs', url_prefix='/api/blogs')


def store_of(request) -> BlogStore:
    return request.app.ctx.blog_store


def blog_not_found(blog_id):
    return exceptions.NotFound('Blog with ID {0} not found'.format(blog_id))


@blog.get('', response_serializer=BlogSerializer(many=True), tags=['blogs'])
async def blog_list(request, *args, **kwargs):
    """
    List blogs
    every blog in insertion order, not paginated
    """
    return store_of(request).all()


@blog.get('/<blog_id>', path_params=blog_id_params,
          response_serializer=BlogSerializer(), tags=['blogs'])
async def blog_detail(request, blog_id, *args, **kwargs):
    """
    Get a blog
    """
    instance = store_of(request).get(blog_id)
    if instance is None:
        raise blog_not_found(blog_id)
    return instance


@blog.post('', body_serializer=BlogBodySerializer(),
           response_serializer=BlogSerializer(), tags=['blogs'])
async def blog_create(request, body, *args, **kwargs):
    """
    Create a blog
    the id is assigned by the server
    """
    return store_of(request).create(body['title'])


@blog.put('/<blog_id>', path_params=blog_id_params, body_serializer=BlogBodySerializer(),
          response_serializer=BlogSerializer(), tags=['blogs'])
async def blog_update(request, blog_id, body, *args, **kwargs):
    """
    Replace the title of a blog
    """
    instance = store_of(request).update(blog_id, body['title'])
    if instance is None:
        raise blog_not_found(blog_id)
    return instance


@blog.delete('/<blog_id>', path_params=blog_id_params,
             response_serializer=MessageSerializer(), tags=['blogs'])
async def blog_delete(request, blog_id, *args, **kwargs):
    """
    Delete a blog
    deleting a blog that does not exist is not an error
    """
    store_of(request).delete(blog_id)
    return {'msg': 'Blog with ID {0} is deleted'.format(blog_id)}
