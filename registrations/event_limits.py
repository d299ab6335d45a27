"""
Group events and their team sizes. Any other event key is a solo event.

Loaded by migration 0002_seed_event_limits and by the setup_initial_data command.
"""

GROUP_EVENTS = [
    {'key': 'skit', 'name': 'Skit', 'min_members': 5, 'max_members': 8},
    {'key': 'mime', 'name': 'Mime', 'min_members': 6, 'max_members': 8},
    {'key': 'dumb_charades', 'name': 'Dumb Charades', 'min_members': 2, 'max_members': 2},
    {'key': 'fashion_show', 'name': 'Fashion Show', 'min_members': 12, 'max_members': 15},
    {'key': 'group_dance', 'name': 'Group Dance', 'min_members': 6, 'max_members': 8},
    {'key': 'group_singing', 'name': 'Group Singing', 'min_members': 6, 'max_members': 6},
    {'key': 'mad_ads', 'name': 'Mad Ads', 'min_members': 5, 'max_members': 5},
    {'key': 'gyan_thantra', 'name': 'Gyan Thantra', 'min_members': 2, 'max_members': 2},
    {'key': 'roadies', 'name': 'Roadies', 'min_members': 3, 'max_members': 3},
    {'key': 'new_product_launch', 'name': 'New Product Launch', 'min_members': 3, 'max_members': 5},
]


def seed_group_events(event_model):
    """
    Create any missing group event rows. Existing rows are left as the admin set them.
    Returns a list of (event, created) pairs.
    """
    results = []
    for event_data in GROUP_EVENTS:
        event, created = event_model.objects.get_or_create(key=event_data['key'], defaults=event_data)
        results.append((event, created))
    return results
