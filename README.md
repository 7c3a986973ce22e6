# fedboard

Building blocks for the backend of a multi-cluster federation dashboard. This is a library. It has no command-line entry point.

## What it provides

### Data selection

- `fedboard.selector` does the selecting.
  - `DataSelector` filters, sorts and paginates a list of `DataCell` objects.
  - `generic_data_select` sorts and paginates.
  - `generic_data_select_with_filter` filters, sorts and paginates. It also returns the number of items that passed the filter.
- `fedboard.comparable` holds `PropertyName` and the value wrappers that decide how values compare and match:
  - `StdComparableString`, where "contains" means substring.
  - `StdComparableInt`.
  - `StdComparableTime`, compared at whole-second precision.
  - `StdComparableRFC3339Timestamp`, which falls back to string comparison when a value does not parse.
- `fedboard.query` builds the selection instructions:
  - `new_sort_query`: alternating `a`/`d` and property names. An odd-length list means no sort. An unknown order or property sets `has_invalid_ascending` or `has_invalid_property`.
  - `new_filter_query`: alternating property and value.
  - `DataSelectQuery`, `NO_SORT`, `NO_FILTER` and `NO_DATA_SELECT`.
- `fedboard.pagination` provides:
  - `PaginationQuery`.
  - `NO_PAGINATION`, `EMPTY_PAGINATION` and `DEFAULT_PAGINATION`.

### Query parsing and helpers

`fedboard.web` reads request query parameters from a plain mapping. A value may be a string or a list of strings.

- `parse_data_select` builds the whole query from these parameters:
  - `itemsPerPage`
  - `page`, which is 1-based
  - `sortBy`, comma separated
  - `filterBy`, comma separated
- `parse_pagination`, `parse_sort` and `parse_filter` each read one part.
- `round_to_two_decimals` rounds a number to two decimals.
- `extract_labels` and `extract_namespaces` collect sorted distinct values from resource mappings or `ObjectMeta` objects.
- `parse_key_value_strings` turns `key=value` strings into a dict. A malformed entry raises `InvalidKeyValueFormat`.

### Status errors

- `fedboard.status` defines `StatusError`, an exception with `code`, `reason`, `message` and `to_dict()`.
  - Constructors: `new_unauthorized`, `new_forbidden`, `new_token_expired`, `new_bad_request`, `new_invalid`, `new_not_found`, `new_internal` and `new_generic_response`.
  - Predicates: `is_unauthorized`, `is_forbidden`, `is_not_found`, `is_already_exists` and `is_token_expired`.
- `fedboard.handling` processes errors:
  - `handle_error` maps an error to an HTTP code and the error to report.
  - `extract_errors` and `append_error` separate non-critical errors from critical ones. A 403 status error is non-critical.
  - `merge_errors` merges error lists and drops repeated messages.
  - `localize_error` replaces known messages with frontend error codes such as `MSG_DEPLOY_NAMESPACE_MISMATCH_ERROR`.

### Resource views

- `fedboard.kubetypes` provides:
  - `ResourceKind`, with `scalable()` and `restartable()`.
  - `ObjectMeta`, `TypeMeta` and `ListMeta`.
  - `new_object_meta` and `new_type_meta`.
- `fedboard.cluster` turns cluster resources, given as plain mappings, into views:
  - `to_cluster` and `to_cluster_list` build `Cluster` and `ClusterList`.
  - `cluster_allocated_resources` computes CPU, memory and pod capacities and fractions. It uses `parse_quantity`, which reads quantities such as `500m`, `8Gi` or `1e3`.
  - `get_cluster_list` works with any client object that has `list_clusters()`.
  - `get_cluster_detail` works with any client object that has `get_cluster(name)`.
- `fedboard.helpers` provides `is_selector_matching` and `is_label_selector_matching`.

### Configuration

`fedboard.settings.DashboardConfig` holds the dashboard settings:

- Docker and chart registries.
- Menu entries.
- The path prefix.

It reads and writes them with `from_yaml`/`to_yaml` and `from_dict`/`to_dict`.

- `init_dashboard_config_from_mount_file` loads a YAML file and makes it the current configuration.
- `get_dashboard_config` returns a copy of the current configuration.
- `set_dashboard_config` replaces it.
- `get_config_key` returns `<ENV_NAME>.yaml`, with `prod` as the default environment.

### Request bodies and responses

- `fedboard.api_types` defines the API request and response bodies as dataclasses. Among them are `LoginRequest`, `PostClusterRequest`, `PostPropagationPolicyRequest` and `ResourceYaml`.
  - `from_json(cls, data)` builds a body from decoded JSON. It checks required fields and types.
  - `to_json(obj)` converts a body back to JSON values.
- `fedboard.responses` wraps payloads in a `BaseResponse` envelope:
  - `success(data)` gives code 200 and message `success`.
  - `fail(err)` gives code 500 and the error message.

### Authentication and version

- `fedboard.auth` reads request headers given as a mapping or as name/value pairs:
  - `has_authorization_header` and `get_bearer_token` read the bearer token.
  - `set_authorization_header` sets it.
  - `build_auth_info` returns an `AuthInfo` with the token and impersonation settings. It raises an unauthorized `StatusError` when no token is present.
- `fedboard.environment` provides `is_dev()` and `user_agent()`.

## What it does not do

The package does not include these:

- An HTTP server or routes.
- A client for the cluster API.
- A way to watch or update the configuration stored in the cluster.

Cluster data comes from a client object that you supply. Configuration comes from a file or from your own code.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from fedboard.comparable import StdComparableString, StdComparableInt
from fedboard.selector import DataCell, generic_data_select_with_filter
from fedboard.web import parse_data_select


class Item(DataCell):
    def __init__(self, name, ident):
        self.name = name
        self.ident = ident

    def get_property(self, name):
        if name == "name":
            return StdComparableString(self.name)
        if name == "creationTimestamp":
            return StdComparableInt(self.ident)
        return None


items = [Item("ab", 1), Item("ac", 2), Item("ba", 3)]
query = parse_data_select({"itemsPerPage": "2", "page": "1", "sortBy": "d,creationTimestamp"})
page, total = generic_data_select_with_filter(items, query)
print([i.ident for i in page], total)  # [3, 2] 3
```

Reading credentials from headers:

```python
from fedboard.auth import build_auth_info

info = build_auth_info({"Authorization": "Bearer token", "Impersonate-User": "alice"})
print(info.token, info.impersonate)  # token alice
```