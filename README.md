# ponghub

ponghub checks a list of HTTP services, records whether each one answered,
keeps a rolling history of the results in a JSON log and renders an HTML
status page from that history with a Jinja2 template.

## Installation

```
pip install ponghub
```

For the test suite: `pip install "ponghub[test]"`.

## Configuration

Services are described in a YAML file, `config.yaml` by default:

```yaml
max_log_days: 30    # days of history kept in the log (default 30)

services:
  - name: Example
    timeout: 10     # seconds per request for this service (default 5)
    retry: 3        # attempts per endpoint for this service (default 2)
    health:
      - url: https://example.com/health
    api:
      - url: https://example.com/api/items
        method: POST
        headers:
          Authorization: Bearer token
        body: '{"query": "ping"}'
        status_code: 201
        response_regex: '"ok":\s*true'
```

Settings that are missing, zero or negative take their defaults. The
top-level `timeout` and `retry` keys are accepted and defaulted too, but the
checks use each service's own `timeout` and `retry`. Loading fails with
`OSError` if the file cannot be opened and with `ponghub.config.ConfigError`
if the YAML is invalid, has values of the wrong type, or defines no services.

## How endpoints are checked

Each endpoint is tried up to `retry` times and stops at the first success.
An endpoint succeeds when:

- neither `status_code` nor `response_regex` is set and the server answers 200;
- only `response_regex` is set and the body (read as UTF-8) matches it;
- `status_code` is set, the answer carries that code and, if
  `response_regex` is also set, the body matches it.

`response_regex` is a Python regular expression searched anywhere in the
body.

Supported methods are `GET`, `POST` and `PUT`; an empty or unrecognised
method falls back to `GET`, while `DELETE`, `HEAD`, `PATCH`, `OPTIONS`,
`TRACE` and `CONNECT` raise `ponghub.check.UnsupportedMethodError`.

An endpoint is `all` when every attempt made succeeded, `none` when none did
and `part` otherwise. A service is `all` when every endpoint is `all`,
`none` when no endpoint is, and `part` otherwise.

## Running

```
ponghub
```

Run it from the directory that holds `config.yaml`. Each run:

1. loads the configuration;
2. checks every service;
3. appends the results to the log, dropping entries older than
   `max_log_days` and entries whose time cannot be parsed;
4. renders the template into the report.

The file locations can be changed:

```
ponghub --config config.yaml --log data/ponghub_log.json \
        --report data/index.html --template templates/report.html
```

The values shown are the defaults. The command exits with status 0 on
success and 1 if any step fails; progress and errors are logged to standard
error. Schedule the command (cron, a CI job, a systemd timer) to build up
history.

## The log

The log is a JSON object keyed by service name, written with two-space
indentation and sorted keys. Each service holds `service_history`, a list of
`{"time": ..., "online": ...}` entries, and `ports`, which maps every
endpoint URL to its own entries; endpoint entries also carry
`response_time` in milliseconds when it is not zero. A missing log file is
treated as empty.

## Using it from Python

```python
from ponghub.config import load_config
from ponghub.check import check_services
from ponghub.result import output_results
from ponghub.report import generate_report

cfg = load_config("config.yaml")
results = check_services(cfg)
log_data = output_results(results, cfg.max_log_days, "data/ponghub_log.json")
generate_report(log_data, "data/index.html", "templates/report.html")
```

Other helpers include `ponghub.result.load_existing_log` and
`save_log_data`, `ponghub.models.clean_expired_entries` and
`parse_to_report_entries`, and `ponghub.report.get_latest_time`.

## Report templates

The template is rendered by Jinja2 with autoescaping on. It receives
`Results`, a list of entries with `name`, `history`, `ports` and
`availability` (the share of service history entries that are `all`, from
0 to 1), and `UpdateTime`, the latest service history time in the log. The
helpers `add`, `sub`, `mul`, `div` (which returns 0 when dividing by zero)
and `until(n)` (the list `0 … n-1`) are available as globals.

## What is not included

ponghub does not ship a report template. Write your own Jinja2 template and
place it at `templates/report.html`, or pass its path with `--template`.
ponghub does not schedule itself or serve the generated page; it runs one
round of checks per invocation and writes static files.