"""Tests for qualified names, paths and document conversion."""

import pytest

from whisk_client.errors import ValidationError
from whisk_client.utils.serializers import (
    build_fqn,
    deserialize_action,
    deserialize_activation,
    is_activation_record,
    namespace_path,
    parse_fqn,
    resolve_qualified_name,
)


@pytest.mark.parametrize('name, expected', [
    ('hello', ('ns', None, 'hello')),
    ('pkg/hello', ('ns', 'pkg', 'hello')),
    ('/other/hello', ('other', None, 'hello')),
    ('/other/pkg/hello', ('other', 'pkg', 'hello')),
])
def test_resolve_qualified_name_forms(name, expected):
    qname = resolve_qualified_name(name, default_namespace='ns')
    assert (qname.namespace, qname.package, qname.name) == expected


def test_explicit_namespace_wins_over_embedded():
    qname = resolve_qualified_name('/embedded/hello', namespace='explicit')
    assert qname.namespace == 'explicit'
    assert qname.fqn == '/explicit/hello'


def test_default_namespace_placeholder():
    assert resolve_qualified_name('hello').namespace == '_'


@pytest.mark.parametrize('name', ['', '/', 'a/b/c', '/ns', '/a/b/c/d', 'bad*name'])
def test_resolve_rejects_malformed_names(name):
    with pytest.raises(ValidationError):
        resolve_qualified_name(name)


def test_path_name_and_fqn():
    qname = resolve_qualified_name('pkg/hello', namespace='ns')
    assert qname.path_name == 'pkg/hello'
    assert qname.fqn == build_fqn('ns', 'pkg', 'hello') == '/ns/pkg/hello'
    assert parse_fqn(qname.fqn) == ('ns', 'pkg', 'hello')


def test_namespace_path_quotes_segments():
    assert namespace_path('_', 'actions') == '/namespaces/_/actions'
    assert namespace_path('ns', 'actions', 'pkg/my action') == '/namespaces/ns/actions/pkg/my%20action'
    assert namespace_path('a@b.c', 'activations', 'abc') == '/namespaces/a%40b.c/activations/abc'


def test_deserialize_action_fills_defaults():
    action = deserialize_action({
        'namespace': 'ns/pkg',
        'name': 'hello',
        'exec': {'kind': 'python:3', 'binary': True},
        'limits': {'memory': 512},
    })

    assert action.package == 'pkg'
    assert action.fqn == '/ns/pkg/hello'
    assert action.exec.code is None
    assert action.exec.binary is True
    assert action.limits.memory == 512
    assert action.limits.timeout == 60000
    assert action.parameters == []


def test_deserialize_activation_normalizes_annotation_dict():
    activation = deserialize_activation({
        'activationId': 'abc',
        'namespace': 'ns',
        'name': 'hello',
        'response': {'success': True, 'result': {'x': 1}, 'status': 'success'},
        'annotations': {'kind': 'python:3'},
    })

    assert activation.response.success is True
    assert activation.response.result == {'x': 1}
    assert activation.annotations == [{'key': 'kind', 'value': 'python:3'}]


def test_is_activation_record():
    assert is_activation_record({'activationId': 'a', 'response': {}})
    assert not is_activation_record({'activationId': 'a'})
    assert not is_activation_record(['activationId', 'response'])
