#  -*- coding: utf-8 -*-
"""
Test suite for records and item chains.

Tests cover:
- Entity: attribute keys, own attributes, delegation to parents
- Parent linkage: allowed parent types, self-parenting
- ItemChain: current/parent/root slots
"""

from __future__ import annotations

import pytest

from projectviewer.entity import (Entity, Client, Group, Project,
                                  ItemChain, get_item_chain, entity_class)


# ========== ========== ========== ========== Fixtures
@pytest.fixture
def acme() -> Client:
    return Client(attributes={'client_id': 'c1', 'client_name': 'Acme'})


@pytest.fixture
def infra(acme: Client) -> Group:
    group = Group(attributes={'group_id': 'g1', 'group_name': 'Infra'})
    group.parent = acme
    return group


@pytest.fixture
def foo(infra: Group) -> Project:
    project = Project(attributes={'project_id': 'p1', 'project_name': 'Foo', 'project_paths': []})
    project.parent = infra
    return project


# ========== ========== ========== ========== Test Entity
class TestEntity:
    """Test attribute storage and lookup."""

    def test_type_discriminators(self) -> None:
        assert Entity.type is None
        assert Client.type == 'client'
        assert Group.type == 'group'
        assert Project.type == 'project'

    def test_creates_without_attributes(self) -> None:
        project = Project()

        assert project.attributes == {}
        assert project.parent is None
        assert project.parent_id is None

    def test_key_prefixes_type(self) -> None:
        assert Project().key('paths') == 'project_paths'
        assert Client().key('expanded') == 'client_expanded'

    def test_key_without_type_raises(self) -> None:
        with pytest.raises(ValueError, match="has no type"):
            Entity().key('name')

    def test_id_and_name_are_own_attributes(self, foo: Project) -> None:
        assert foo.id == 'p1'
        assert foo.name == 'Foo'

    def test_item_assignment_sets_own_attribute(self) -> None:
        project = Project()
        project['project_name'] = 'Bar'

        assert project.own_keys == ['project_name']
        assert project['project_name'] == 'Bar'

    def test_attributes_must_be_dict(self) -> None:
        with pytest.raises(TypeError):
            Project(attributes=['project_name'])

    def test_missing_key_raises(self, foo: Project) -> None:
        with pytest.raises(KeyError, match="No attribute 'client_icon'"):
            foo['client_icon']

    def test_entity_class_lookup(self) -> None:
        assert entity_class('group') is Group

        with pytest.raises(KeyError, match='Unknown entity type'):
            entity_class('folder')

    def test_equality_is_identity(self) -> None:
        first = Project(attributes={'project_name': 'Foo'})
        second = Project(attributes={'project_name': 'Foo'})

        assert first != second
        assert first.equal(second)
        assert not first.equal(Group(attributes={'project_name': 'Foo'}))


# ========== ========== ========== ========== Test Delegation
class TestDelegation:
    """Test attribute lookup along the parent chain."""

    def test_resolves_own_attribute_first(self, foo: Project) -> None:
        assert foo.resolve('project_name') == 'Foo'

    def test_resolves_parent_attribute(self, foo: Project) -> None:
        assert foo.resolve('group_name') == 'Infra'

    def test_resolves_root_attribute(self, foo: Project) -> None:
        assert foo.resolve('client_name') == 'Acme'

    def test_own_attribute_shadows_parent(self, foo: Project) -> None:
        foo['client_name'] = 'Local'

        assert foo.resolve('client_name') == 'Local'

    def test_none_value_shadows_parent(self, infra: Group, foo: Project) -> None:
        infra['sort_by'] = 'position'
        foo['sort_by'] = None

        assert foo.resolve('sort_by', 'missing') is None

    def test_default_when_unresolved(self, foo: Project) -> None:
        assert foo.resolve('client_icon', 'none') == 'none'
        assert 'client_icon' not in foo
        assert 'client_name' in foo

    def test_chain_lists_ancestors(self, acme: Client, infra: Group, foo: Project) -> None:
        assert foo.chain == [infra, acme]
        assert list(foo.lineage()) == [foo, infra, acme]

    def test_parent_id_follows_parent(self, infra: Group, foo: Project) -> None:
        assert foo.parent_id == 'g1'

        foo.parent = None

        assert foo.parent_id is None


# ========== ========== ========== ========== Test Parent Linkage
class TestParentLinkage:
    """Test which records may be placed under which."""

    def test_project_under_client(self, acme: Client) -> None:
        project = Project()
        project.parent = acme

        assert project.parent is acme

    def test_group_under_group_raises(self, infra: Group) -> None:
        with pytest.raises(TypeError, match='cannot be placed under'):
            Group().parent = infra

    def test_client_never_has_parent(self, infra: Group) -> None:
        with pytest.raises(TypeError):
            Client().parent = infra

    def test_group_under_project_raises(self, foo: Project) -> None:
        with pytest.raises(TypeError):
            Group().parent = foo

    def test_parent_must_be_entity(self) -> None:
        with pytest.raises(TypeError):
            Project().parent = 'g1'

    def test_cannot_be_own_parent(self) -> None:
        project = Project()

        with pytest.raises(ValueError, match='own parent'):
            project.parent = project


# ========== ========== ========== ========== Test ItemChain
class TestItemChain:
    """Test chain resolution."""

    def test_full_chain(self, acme: Client, infra: Group, foo: Project) -> None:
        chain = get_item_chain(foo)

        assert chain.current is foo
        assert chain.parent is infra
        assert chain.root is acme
        assert list(chain) == [foo, infra, acme]

    def test_project_under_client(self, acme: Client) -> None:
        project = Project(attributes={'project_name': 'Solo'})
        project.parent = acme

        chain = get_item_chain(project)

        assert chain.current is project
        assert chain.parent is acme
        assert chain.root is None

    def test_root_level_entity(self) -> None:
        project = Project(attributes={'project_name': 'Foo'})

        chain = get_item_chain(project)

        assert chain.current is project
        assert chain.parent is None
        assert chain.root is None

    def test_entity_without_own_attributes_still_walks(self, infra: Group, acme: Client) -> None:
        project = Project()
        project.parent = infra

        chain = get_item_chain(project)

        assert chain.current is None
        assert chain.parent is infra
        assert chain.root is acme

    def test_none_gives_empty_chain(self) -> None:
        chain = get_item_chain(None)

        assert not chain
        assert chain.current is None and chain.parent is None and chain.root is None

    @pytest.mark.parametrize('depth', [0, 1, 2])
    def test_root_implies_parent(self, depth: int) -> None:
        records = [Project(attributes={'project_name': 'p'}),
                   Group(attributes={'group_name': 'g'}),
                   Client(attributes={'client_name': 'c'})]

        for child, parent in list(zip(records, records[1:]))[:depth]:
            child.parent = parent

        for record in records:
            chain = get_item_chain(record)

            if chain.root is not None:
                assert chain.parent is not None

    def test_root_without_parent_raises(self, acme: Client) -> None:
        with pytest.raises(ValueError, match='root without a parent'):
            ItemChain(root=acme)
