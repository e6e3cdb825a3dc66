"""Lifecycle tests against the in-memory controller."""

import httpx
import pytest

from whisk_client import ClientConfig, WhiskClient, build_archive
from whisk_client.errors import Conflict, InvalidPayload, NotFound, Unauthorized, ValidationError
from whisk_client.models import Limits

CODE = '''
def main(args):
    return {"greeting": "Hello " + args.get("name", "stranger")}
'''

NEW_CODE = '''
def main(args):
    return {"greeting": "Hi " + args.get("name", "stranger")}
'''


class TestCreateAndGet:
    def test_get_returns_what_was_created(self, client):
        created = client.actions.create(
            'hello',
            CODE,
            parameters={'name': 'world'},
            limits={'memory': 512},
            annotations={'web-export': True},
        )
        fetched = client.actions.get('hello')

        assert fetched.exec.code == CODE
        assert fetched.exec.kind == 'python:3'
        assert fetched.exec.binary is False
        assert fetched.parameters == [{'key': 'name', 'value': 'world'}]
        assert fetched.annotations == [{'key': 'web-export', 'value': True}]
        assert fetched.limits.memory == 512
        assert fetched.limits.timeout == 60000
        assert fetched.namespace == created.namespace == 'guest'
        assert fetched.fqn == '/guest/hello'

    def test_get_without_code(self, client):
        client.actions.create('hello', CODE)
        assert client.actions.get('hello', code=False).exec.code is None

    def test_create_existing_raises_conflict(self, client):
        client.actions.create('hello', CODE)

        with pytest.raises(Conflict) as exc_info:
            client.actions.create('hello', NEW_CODE)

        assert exc_info.value.status_code == 409
        assert client.actions.get('hello').exec.code == CODE

    def test_create_without_source_is_rejected_locally(self, client, controller):
        with pytest.raises(InvalidPayload):
            client.actions.create('hello', None)
        assert controller.extensions['whisk'].actions == {}

    def test_create_with_limits_model(self, client):
        action = client.actions.create('hello', CODE, limits=Limits(timeout=1000, memory=128))
        assert action.limits == Limits(timeout=1000, memory=128, logs=10, concurrency=1)

    def test_create_in_package(self, client):
        action = client.actions.create('utils/hello', CODE)

        assert action.namespace == 'guest/utils'
        assert action.package == 'utils'
        assert client.actions.get('/guest/utils/hello').fqn == '/guest/utils/hello'

    def test_get_missing_raises_not_found(self, client):
        with pytest.raises(NotFound) as exc_info:
            client.actions.get('missing')
        assert exc_info.value.resource == '/guest/missing'

    def test_invalid_limits_are_rejected_locally(self, client):
        with pytest.raises(ValidationError):
            client.actions.create('hello', CODE, limits={'memory': 1})

    def test_create_with_legacy_kind(self, client):
        action = client.actions.create('legacy', 'function main() { return {} }', kind='nodejs:6')
        assert client.actions.get('legacy').exec.kind == action.exec.kind == 'nodejs:6'


class TestUpdate:
    def test_update_merges_parameters_and_keeps_exec(self, client):
        client.actions.create('hello', CODE, parameters={'a': 1, 'b': 2})

        updated = client.actions.update('hello', parameters={'b': 20, 'c': 30})

        assert updated.parameter_dict() == {'a': 1, 'b': 20, 'c': 30}
        fetched = client.actions.get('hello')
        assert fetched.exec.code == CODE
        assert fetched.exec.kind == 'python:3'

    def test_update_replace_parameters(self, client):
        client.actions.create('hello', CODE, parameters={'a': 1, 'b': 2})

        updated = client.actions.update('hello', parameters={'c': 3}, replace_parameters=True)

        assert updated.parameters == [{'key': 'c', 'value': 3}]

    def test_update_source_keeps_parameters(self, client):
        client.actions.create('hello', CODE, parameters={'a': 1})

        updated = client.actions.update('hello', source=NEW_CODE)

        assert updated.exec.code == NEW_CODE
        assert updated.exec.kind == 'python:3'
        assert updated.parameter_dict() == {'a': 1}

    def test_update_keeps_current_kind_for_new_source(self, client):
        client.actions.create('hello', 'function main() {}', kind='nodejs:20')
        updated = client.actions.update('hello', source='function main() { return {} }')
        assert updated.exec.kind == 'nodejs:20'

    def test_update_kind_alone_keeps_code(self, client):
        client.actions.create('hello', CODE, kind='python:3.12', parameters={'a': 1})

        updated = client.actions.update('hello', kind='python:3.11')

        assert updated.exec.kind == 'python:3.11'
        assert updated.exec.code == CODE
        assert updated.parameter_dict() == {'a': 1}
        assert client.actions.get('hello').exec.kind == 'python:3.11'

    def test_update_main_alone_keeps_archive(self, client):
        archive = build_archive({'lib.py': 'def handler(args):\n    return {}\n'}, entry='lib.py')
        created = client.actions.create('zipped', archive, main='main')

        updated = client.actions.update('zipped', main='handler')

        assert updated.exec.main == 'handler'
        assert updated.exec.binary is True
        assert updated.exec.code == created.exec.code

    def test_update_malformed_kind_is_rejected(self, client):
        client.actions.create('hello', CODE)

        with pytest.raises(InvalidPayload):
            client.actions.update('hello', kind='python')
        assert client.actions.get('hello').exec.kind == 'python:3'

    def test_update_merges_limits(self, client):
        client.actions.create('hello', CODE, limits={'memory': 512})
        updated = client.actions.update('hello', limits={'timeout': 5000})
        assert updated.limits.memory == 512
        assert updated.limits.timeout == 5000

    def test_update_bumps_version(self, client):
        client.actions.create('hello', CODE)
        assert client.actions.update('hello', parameters={'x': 1}).version == '0.0.2'
        assert client.actions.update('hello', version='1.0.0').version == '1.0.0'

    def test_update_missing_raises_not_found(self, client, controller):
        with pytest.raises(NotFound):
            client.actions.update('missing', parameters={'a': 1})
        assert controller.extensions['whisk'].actions == {}


class TestDelete:
    def test_delete_removes_action(self, client):
        client.actions.create('hello', CODE)
        client.actions.delete('hello')

        with pytest.raises(NotFound):
            client.actions.get('hello')

    def test_delete_twice_raises_not_found(self, client):
        client.actions.create('hello', CODE)
        client.actions.delete('hello')

        with pytest.raises(NotFound):
            client.actions.delete('hello')


class TestList:
    def test_list_only_returns_requested_namespace(self, client):
        client.actions.create('b-action', CODE)
        client.actions.create('a-action', CODE)
        client.actions.create('other-action', CODE, namespace='other')

        summaries = client.actions.list()

        assert [s.name for s in summaries] == ['a-action', 'b-action']
        assert all(s.namespace == 'guest' for s in summaries)
        assert [s.name for s in client.actions.list(namespace='other')] == ['other-action']

    def test_list_empty_namespace(self, client):
        assert client.actions.list(namespace='empty') == []

    def test_list_paging(self, client):
        for name in ('a', 'b', 'c'):
            client.actions.create(name, CODE)

        assert [s.name for s in client.actions.list(limit=2)] == ['a', 'b']
        assert [s.name for s in client.actions.list(limit=2, skip=2)] == ['c']


def test_default_namespace_placeholder_resolves_server_side(controller, config):
    placeholder = config.with_overrides(namespace='_')
    with WhiskClient(placeholder, transport=httpx.WSGITransport(app=controller)) as whisk:
        whisk.actions.create('hello', CODE)
        assert whisk.actions.get('/guest/hello').name == 'hello'


def test_wrong_credentials_raise_unauthorized(controller, config):
    wrong = config.with_overrides(api_key='uuid:wrong')
    with WhiskClient(wrong, transport=httpx.WSGITransport(app=controller)) as whisk:
        with pytest.raises(Unauthorized):
            whisk.actions.list()
