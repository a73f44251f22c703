# forcetool

Building blocks for working with Salesforce orgs from Python. The package
uses only the standard library.

## Modules

- `forcetool.bulk`: Bulk API job and batch descriptions. `JobInfo` and
  `BatchInfo` are dataclasses. `JobInfo.to_xml()` builds a `jobInfo`
  request document, and `JobInfo.from_xml()`, `BatchInfo.from_xml()` and
  `BatchInfo.from_json()` decode responses. `parse_batch_info()`,
  `parse_batch_list()` and `parse_job_list()` decode response bodies.
  `bulk_url()` builds `/services/async/...` URLs.
  `iter_batch_result_chunks()` reads a result stream in `BatchResultChunk`
  pieces, 50 MiB each by default.
- `forcetool.bayeux`: a long-polling Bayeux (CometD) `Client`. It is given
  a `post(url, body)` callable that returns the response body. It has
  `connect()`, `subscribe(pattern, out, ext)`, `unsubscribe(pattern)`,
  `poll()` and `close()`, and raises `BayeuxError` when the server refuses
  a request. `channel_matches()` matches channel names against glob
  patterns. In a pattern, `*` matches within one path segment and `**`
  matches across segments.
- `forcetool.display`: renders query records as text.
  `flatten_force_record()` flattens a record. `render_force_records()`
  draws a text table with nested subqueries. `render_records_csv()` and
  `render_records_json()` give CSV and JSON. `format_query_result()` adds
  the record count. The `format_*` functions describe batches, jobs,
  metadata lists, sObjects and nested mappings. `field_types_help()` and
  `field_details()` return field-type help text.
- `forcetool.testrun`: `run_tests(runner, tests, namespace)` calls
  `runner.run_tests(tests, namespace)`. It raises `TestsNotFoundError` when
  nothing ran and nothing failed. `qualify_methods()` and
  `normalize_test_names()` prepare test names. `generate_results()` formats
  a `TestCoverage` as a coverage and pass/fail report.
- `forcetool.junit`: `TestSuite`, `TestCase`, `Failure`, `JUnitError` and
  `Property`. `TestSuite.update()` recounts the totals and
  `TestSuite.to_xml()` writes a JUnit XML document.
- `forcetool.dxauth`: `get_org_list()` runs `sfdx force:org:list --json`,
  which needs the `sfdx` tool on `PATH`. `find_user_in_org_list()`,
  `find_default_users()`, `choose_default_user()` and
  `connection_is_usable()` pick a login from that output.
  `in_project_dir()` checks for a `.sfdx` directory. Failures raise
  `DxAuthError`.
- `forcetool.httpaux`: `ContentType`, `HttpMethod`, `SessionExpiredError`,
  `RequestInput`, the `HttpRetrier` retry policy, `default_retrier()` and
  `user_agent()`.
- `forcetool.apiversion`: `api_version()`, `api_version_number()` and
  `set_api_version()`. The default is `55.0`, and versions must look like
  `nn.0`.
- `forcetool.config`: `get_source_dir()` finds a `src` or `metadata`
  directory. If none exists, it creates `src` with a `metadata` symlink.
- `forcetool.folder`: `build_folders()`, `metadata_query()` and
  `metadata_in_folders()` list foldered metadata (reports, dashboards,
  documents, email templates).
- `forcetool.desktop`: `open_command()` and `open_uri()` open a URI with
  the platform's default handler.
- `forcetool.errors`: `format_error()`, `error_and_exit()`,
  `exit_if_error()` and `info()` write messages to standard error.
- `forcetool.internal`: `json_unmarshal()`, `xml_unmarshal()` and
  `xml_marshal()`. Failures raise `MarshalError` with a short preview of
  the input.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Rendering query records as a table:

```python
from forcetool.display import render_force_records

records = [{"Id": "001A", "Name": "Acme"}, {"Id": "001B", "Name": None}]
print(render_force_records(records))
```

Building a Bulk API job request:

```python
from forcetool.apiversion import api_version_number
from forcetool.bulk import JobInfo, bulk_url

job = JobInfo(operation="query", object="Account", content_type="CSV")
body = job.to_xml()
url = bulk_url("https://instance.example.com", api_version_number(), "job")
```

Running Apex tests through your own runner and summarising the results:

```python
from forcetool.testrun import TestCoverage, generate_results, qualify_methods, run_tests

class Runner:
    def run_tests(self, tests, namespace):
        return TestCoverage(number_run=len(tests))

names = qualify_methods("MyClass", ["method1", "method2"])
print(generate_results(run_tests(Runner(), names, "")))
```

Selecting the API version:

```python
from forcetool.apiversion import api_version, set_api_version

set_api_version("58.0")
assert api_version() == "v58.0"
```

## What the package does not do

`forcetool` has no HTTP client of its own. It does not log in, store or
refresh sessions, or send REST, SOAP, Bulk or Tooling API requests. The
bulk functions build URLs and request bodies and decode responses, and
`bayeux.Client` sends its requests through the `post` callable you give
it. Test runners are also supplied by the caller. The package provides no
command-line program.