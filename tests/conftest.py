"""Shared fixtures: a small schema following Infrahub's naming conventions."""

import pytest

from infrahub_pygen.core.parser import parse_schema
from infrahub_pygen.core.registry import SchemaRegistry

SCHEMA_SDL = '''
schema {
  query: Query
  mutation: Mutation
}

scalar GenericScalar
scalar JSONString

enum WidgetStatus {
  ACTIVE
  RETIRED
}

"""A widget on the shelf."""
type Widget {
  id: ID!
  name: String
}

type EdgedWidget {
  node: Widget
}

type PaginatedWidget {
  count: Int!
  edges: [EdgedWidget!]!
}

type DeviceInterface {
  id: ID!
  name: String!
  device: DeviceRack
  status: WidgetStatus
}

type EdgedDeviceInterface {
  node: DeviceInterface
}

type PaginatedDeviceInterface {
  count: Int!
  edges: [EdgedDeviceInterface!]!
}

type DeviceRack {
  id: ID!
  label: String
  interfaces: [DeviceInterface]
}

type EdgedDeviceRack {
  node: DeviceRack
}

type PaginatedDeviceRack {
  count: Int
  edges: [EdgedDeviceRack]
}

union SearchResult = Widget | DeviceRack

input WidgetCreateInput {
  name: String!
  status: WidgetStatus = ACTIVE
}

type WidgetCreate {
  ok: Boolean
  object: Widget
}

type WidgetDelete {
  ok: Boolean
}

type DeviceRackUpsert {
  ok: Boolean
  object: DeviceRack
}

type Query {
  widgetList(ids: [ID], limit: Int, offset: Int): PaginatedWidget
  DeviceInterface(ids: [ID]): PaginatedDeviceInterface
  DeviceRack(limit: Int): PaginatedDeviceRack
  search(q: String!): [SearchResult]
  info: String
}

type Mutation {
  WidgetCreate(data: WidgetCreateInput!): WidgetCreate
  WidgetDelete(id: ID!): WidgetDelete
  DeviceRackUpsert(data: GenericScalar): DeviceRackUpsert
}
'''


@pytest.fixture
def schema_sdl():
    return SCHEMA_SDL


@pytest.fixture
def registry():
    """Registry built from the shared schema."""
    return SchemaRegistry.build(parse_schema(SCHEMA_SDL))
