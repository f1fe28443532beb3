"""All the boiler plate for defining metrics.

Every modem metric is derived from one column of one of the HTML tables on the modem's pages.
The tables have no usable headers (see parse.py) so each Scheme below maps a column position to the
    metric that the value should be published as and the rule for decoding the cell.
If a firmware update moves things around, only this file should need to change.

The exporter's own metrics (scrape counts, parse errors, request timing) live in ExporterMetrics and
    are registered against whatever registry the exporter is given.
"""

from prometheus_client import (
    CollectorRegistry,
    Counter,
    GCCollector,
    Histogram,
    Info,
    PlatformCollector,
    ProcessCollector,
    disable_created_metrics,
)
from tc4400.decode import (
    COUNTER,
    GAUGE,
    CategoricalLabel,
    ColumnRule,
    DirectInt,
    MetricDesc,
    PageSpec,
    RawKey,
    RowKey,
    Scheme,
    StatusEquals,
    UnitFloat,
    UnitInt,
)
from util.const import (
    CONN_STATUS_PAGE,
    EXPORTER_VERSION,
    METRICS_NS,
    STATS_IFC_PAGE,
)

# By default, client will automatically create a "_created" meta metric for
#   each counter/histogram.
# Having the unix epoch time of when the metric was created isn't that useful for us
#   so we'll disable it.
disable_created_metrics()

CHANNEL_LABEL = "channel"
INTERFACE_LABEL = "interface"

# Frequency and width columns show up in either unit depending on firmware
FREQUENCY_UNITS = {"Hz": 1, "kHz": 1000}

LOCKED = StatusEquals("Locked")
BONDED = StatusEquals("Bonded")


def _fq_name(subsystem: str, name: str) -> str:
    return "_".join(part for part in (METRICS_NS, subsystem, name) if part)


def _network_column(name: str, documentation: str) -> ColumnRule:
    return ColumnRule(
        MetricDesc(_fq_name("network", name), documentation, COUNTER, (INTERFACE_LABEL,)),
        DirectInt(),
    )


def _channel_metric(
    subsystem: str, name: str, documentation: str, *extra_labels: str, kind: str = GAUGE
) -> MetricDesc:
    return MetricDesc(
        _fq_name(subsystem, name), documentation, kind, (CHANNEL_LABEL, *extra_labels)
    )


# Reported every poll no matter how many pages failed
UP = MetricDesc(_fq_name("", "up"), "Was the last scrape of TC4400 successful.")

##
# statsifc.html
##
# One row per interface: name followed by rx bytes/packets/errs/drop and tx bytes/packets/errs/drop.
# NOTE: on the firmware this was built against, the bytes/packets counters never move between polls.
#   Might be the wrong table, might be the firmware. Without a second modem to compare against the
#   mapping is left alone.
NETWORK_SCHEME = Scheme(
    row_length=9,
    key_column=0,
    key_rule=RawKey(),
    columns={
        1: _network_column("receive_bytes_total", "Bytes received on the interface."),
        2: _network_column("receive_packets_total", "Packets received on the interface."),
        3: _network_column("receive_errs_total", "Receive errors on the interface."),
        4: _network_column("receive_drop_total", "Received packets dropped on the interface."),
        5: _network_column("transmit_bytes_total", "Bytes transmitted on the interface."),
        6: _network_column("transmit_packets_total", "Packets transmitted on the interface."),
        7: _network_column("transmit_errs_total", "Transmit errors on the interface."),
        8: _network_column("transmit_drop_total", "Transmitted packets dropped on the interface."),
    },
)

##
# cmconnectionstatus.html
##
# Downstream rows look like
#   ['1', '1', 'Locked', 'SC-QAM', 'Bonded', '603000000 Hz', '6400000 Hz', '35 dB', '3.5 dBmV', '256QAM', '100', '2', '0']
# Index, Channel ID, Lock Status, Channel Type, Bonding Status, Center Frequency, Width,
#   SNR/MER Threshold, Receive Level, Modulation/Profile ID, Unerrored, Corrected, Uncorrectable
# Column 0 is just a row number; the channel id in column 1 is what labels everything else.
DOWNSTREAM_SCHEME = Scheme(
    row_length=13,
    key_column=1,
    key_rule=RowKey(width=2),
    columns={
        2: ColumnRule(_channel_metric("downstream", "locked", "Downstream Lock Status"), LOCKED),
        3: ColumnRule(
            _channel_metric("downstream", "channel_type", "Downstream Channel Type", "type"),
            CategoricalLabel(),
        ),
        4: ColumnRule(_channel_metric("downstream", "bonded", "Downstream Bonding Status"), BONDED),
        5: ColumnRule(
            _channel_metric("downstream", "center_frequency_hz", "Downstream Center Frequency"),
            UnitInt(FREQUENCY_UNITS),
        ),
        6: ColumnRule(
            _channel_metric("downstream", "width_hz", "Downstream Width"),
            UnitInt(FREQUENCY_UNITS),
        ),
        7: ColumnRule(
            _channel_metric("downstream", "snr_threshold_db", "Downstream SNR/MER Threshold Value"),
            UnitFloat("dB"),
        ),
        8: ColumnRule(
            _channel_metric("downstream", "receive_level_dbmv", "Downstream Receive Level"),
            UnitFloat("dBmV"),
        ),
        9: ColumnRule(
            _channel_metric("downstream", "modulation", "Downstream Modulation/Profile ID", "modulation"),
            CategoricalLabel(),
        ),
        10: ColumnRule(
            _channel_metric(
                "downstream", "codewords_unerrored_total", "Downstream Unerrored Codewords", kind=COUNTER
            ),
            DirectInt(),
        ),
        11: ColumnRule(
            _channel_metric(
                "downstream", "codewords_corrected_total", "Downstream Corrected Codewords", kind=COUNTER
            ),
            DirectInt(),
        ),
        12: ColumnRule(
            _channel_metric(
                "downstream", "codewords_uncorrectable_total", "Downstream Uncorrectable Codewords", kind=COUNTER
            ),
            DirectInt(),
        ),
    },
)

# Upstream rows look like
#   ['1', '1', 'Locked', 'SC-QAM', 'Bonded', '30800000 Hz', '6400000 Hz', '47.0 dBmV', 'ATDMA']
UPSTREAM_SCHEME = Scheme(
    row_length=9,
    key_column=1,
    key_rule=RowKey(width=2),
    columns={
        2: ColumnRule(_channel_metric("upstream", "locked", "Upstream Lock Status"), LOCKED),
        3: ColumnRule(
            _channel_metric("upstream", "channel_type", "Upstream Channel Type", "type"),
            CategoricalLabel(),
        ),
        4: ColumnRule(_channel_metric("upstream", "bonded", "Upstream Bonding Status"), BONDED),
        5: ColumnRule(
            _channel_metric("upstream", "center_frequency_hz", "Upstream Center Frequency"),
            UnitInt(FREQUENCY_UNITS),
        ),
        6: ColumnRule(
            _channel_metric("upstream", "width_hz", "Upstream Width"),
            UnitInt(FREQUENCY_UNITS),
        ),
        7: ColumnRule(
            _channel_metric("upstream", "transmit_level_dbmv", "Upstream Transmit Level"),
            UnitFloat("dBmV"),
        ),
        8: ColumnRule(
            _channel_metric("upstream", "modulation", "Upstream Modulation/Profile ID", "modulation"),
            CategoricalLabel(),
        ),
    },
)

# Pages are polled in this order. Table 0 on the connection status page is the startup procedure
#   which we don't publish, but it still has to be there for the page to count as complete.
PAGES = (
    PageSpec(STATS_IFC_PAGE, {0: NETWORK_SCHEME}),
    PageSpec(CONN_STATUS_PAGE, {1: DOWNSTREAM_SCHEME, 2: UPSTREAM_SCHEME}),
)


def catalog(pages=PAGES) -> list[MetricDesc]:
    """Every modem metric the pages can produce, in column order"""
    descs = []
    for page in pages:
        for _, scheme in sorted(page.tables.items()):
            descs.extend(col.metric for _, col in sorted(scheme.columns.items()))
    return descs


class ExporterMetrics:
    """Meta metrics about the exporter itself. These live for the life of the process."""

    def __init__(self, registry: CollectorRegistry):
        self.total_scrapes = Counter(
            f"{METRICS_NS}_exporter_scrapes",
            "Current total TC4400 scrapes.",
            registry=registry,
        )
        # Only two pages so the label is bounded
        self.parse_failures = Counter(
            f"{METRICS_NS}_exporter_parse_errors",
            "Number of errors while parsing HTML tables.",
            labelnames=["file"],
            registry=registry,
        )
        # Status codes seen from the modem are few (200/401/404) plus `error` for no response at all
        self.client_request_count = Counter(
            f"{METRICS_NS}_exporter_client_requests",
            "HTTP requests to TC4400",
            labelnames=["code", "method"],
            registry=registry,
        )
        self.client_request_duration = Histogram(
            f"{METRICS_NS}_exporter_client_request_duration_seconds",
            "Histogram of TC4400 HTTP request latencies.",
            labelnames=["code", "method"],
            registry=registry,
        )
        self.build_info = Info(
            f"{METRICS_NS}_exporter_build",
            "Version of the TC4400 exporter.",
            registry=registry,
        )
        self.build_info.info({"version": EXPORTER_VERSION})


def register_runtime_collectors(registry: CollectorRegistry) -> None:
    """process_* / python_* metrics; the default registry gets these for free but ours doesn't"""
    ProcessCollector(registry=registry)
    PlatformCollector(registry=registry)
    GCCollector(registry=registry)
