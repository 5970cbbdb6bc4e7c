# -*- coding: utf-8 -*-
import logging
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Blog:
    id: int
    title: str


class BlogStore:
    """
    In-memory blogs, the only owner of the collection.

    Ids come from a counter that only moves forward, an id is never issued twice
    even after its blog is deleted. Every operation holds one lock, so the store
    can be shared by threads as well as by the tasks of one event loop.
    The title is validated by the route's serializer, not here.
    """

    def __init__(self, blogs: Iterable[Blog] = ()):
        self._lock = threading.Lock()
        self._blogs = {}
        self._last_id = 0
        for blog in blogs:
            if blog.id in self._blogs:
                raise ValueError('duplicate blog id %s' % blog.id)
            self._blogs[blog.id] = blog
            self._last_id = max(self._last_id, blog.id)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> 'BlogStore':
        """ build a store from `[{'id': 1, 'title': '...'}, ...]`, eg. settings SEED_BLOGS
        """
        return cls(Blog(id=int(record['id']), title=record['title']) for record in records)

    def __len__(self):
        with self._lock:
            return len(self._blogs)

    def __contains__(self, blog_id):
        with self._lock:
            return blog_id in self._blogs

    def all(self) -> List[Blog]:
        """ blogs in insertion order
        """
        with self._lock:
            return list(self._blogs.values())

    def get(self, blog_id: int) -> Optional[Blog]:
        with self._lock:
            return self._blogs.get(blog_id)

    def create(self, title: str) -> Blog:
        with self._lock:
            self._last_id += 1
            blog = Blog(id=self._last_id, title=title)
            self._blogs[blog.id] = blog
        logger.info('blog %s created', blog.id)
        return blog

    def update(self, blog_id: int, title: str) -> Optional[Blog]:
        """ replace the title of the blog, keep its id and position.
        :return: the updated blog, None if there is no such blog
        """
        with self._lock:
            if blog_id not in self._blogs:
                return None
            blog = Blog(id=blog_id, title=title)
            self._blogs[blog_id] = blog
        logger.info('blog %s updated', blog_id)
        return blog

    def delete(self, blog_id: int) -> bool:
        """ :return: whether a blog was removed
        """
        with self._lock:
            removed = self._blogs.pop(blog_id, None) is not None
        if removed:
            logger.info('blog %s deleted', blog_id)
        return removed
