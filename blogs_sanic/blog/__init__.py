from .store import Blog, BlogStore
from .views import blog
