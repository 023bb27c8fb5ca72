import pytest

from apps.placement.status import DEFAULT_STATUS_MAP, StatusResolver


@pytest.mark.parametrize('title, status', [
    ('Backlog', 'backlog'),
    ('Todo', 'todo'),
    ('Doing', 'in_progress'),
    ('Reviewing', 'review'),
    ('Finished', 'done'),
    ('Done', 'done'),
])
def test_known_titles(title, status):
    assert StatusResolver().resolve(title) == status


@pytest.mark.parametrize('title', ['Bloqueados', '', 'todo', 'DONE', ' Doing'])
def test_unknown_or_differently_cased_titles_use_default(title):
    assert StatusResolver().resolve(title) == 'backlog'


def test_custom_mapping_and_default():
    resolver = StatusResolver({'Em andamento': 'in_progress'}, default='todo')

    assert resolver.resolve('Em andamento') == 'in_progress'
    assert resolver.resolve('Doing') == 'todo'


def test_mapping_from_settings(settings):
    settings.PLACEMENT = {
        'STATUS_MAP': {**DEFAULT_STATUS_MAP, 'QA': 'review'},
        'DEFAULT_STATUS': 'todo',
    }
    resolver = StatusResolver()

    assert resolver.resolve('QA') == 'review'
    assert resolver.resolve('Finished') == 'done'
    assert resolver.resolve('Qualquer') == 'todo'
