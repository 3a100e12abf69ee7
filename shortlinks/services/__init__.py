from shortlinks.services.allocator import SlugAllocator, generate_candidate, try_allocate
from shortlinks.services.resolver import LinkResolver
from shortlinks.services.admin import AdminContext, LinkAdministrator


__all__ = [
    'SlugAllocator',
    'generate_candidate',
    'try_allocate',
    'LinkResolver',
    'AdminContext',
    'LinkAdministrator',
]
