import uuid
import logging
import sys
from types import SimpleNamespace
from contextlib import contextmanager

# OpenTelemetry imports
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.trace import SpanKind, Status, StatusCode

# OpenTelemetry logging imports
from opentelemetry._logs import set_logger_provider
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter

# JSON logging for OpenTelemetry
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)


class Telemetry:
    def __init__(self, service_name="guildmentions", endpoint="localhost:4317"):
        self.service_name = service_name
        self.endpoint = endpoint

        # Shared resource for logs, metrics and traces
        self.resource = Resource.create({
            "service.name": self.service_name,
            "service.instance.id": self.get_instance_id(),
        })

        self.setup_logging()

        self.metrics = self.setup_metrics()
        self.tracer = self.setup_tracing()

    def get_instance_id(self):
        """Get the Docker container ID or generate a unique ID if not in Docker"""
        try:
            with open('/proc/self/cgroup', 'r') as f:
                for line in f:
                    if '/docker/' in line:
                        return line.strip().split('/')[-1][:12]
        except OSError:
            pass

        try:
            with open('/etc/hostname', 'r') as f:
                hostname = f.read().strip()
                if len(hostname) == 12 and all(c in '0123456789abcdef' for c in hostname):
                    return hostname
        except OSError:
            pass

        return uuid.uuid4().hex[:12]

    def setup_logging(self):
        """Configure structured logging with standard stdout and OpenTelemetry integration."""
        stdout_handler = logging.StreamHandler(sys.stdout)

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.INFO)
        root_logger.addHandler(stdout_handler)

        # Module name as a prefix on console lines
        console_formatter = logging.Formatter('[%(name)s] %(message)s')
        stdout_handler.setFormatter(console_formatter)

        otel_logger_provider = LoggerProvider(resource=self.resource)
        set_logger_provider(otel_logger_provider)

        otlp_log_exporter = OTLPLogExporter(
            endpoint=self.endpoint,
            insecure=True
        )
        otel_logger_provider.add_log_record_processor(
            BatchLogRecordProcessor(otlp_log_exporter)
        )

        otel_handler = LoggingHandler(
            level=logging.NOTSET,
            logger_provider=otel_logger_provider
        )
        otel_handler.setFormatter(jsonlogger.JsonFormatter())

        root_logger.addHandler(otel_handler)

        logger.info("OpenTelemetry logging configured")

    def setup_metrics(self):
        """Set up OpenTelemetry metrics"""
        logger.info(f"Setting up OpenTelemetry metrics for {self.service_name} -> {self.endpoint}")

        otlp_exporter = OTLPMetricExporter(
            endpoint=self.endpoint,
            insecure=True
        )
        otlp_reader = PeriodicExportingMetricReader(
            exporter=otlp_exporter,
            export_interval_millis=15000  # Export every 15 seconds
        )

        provider = MeterProvider(metric_readers=[otlp_reader], resource=self.resource)
        metrics.set_meter_provider(provider)

        meter = metrics.get_meter("guildmentions_metrics")

        mention_resolution = meter.create_counter(
            name="mention_resolution",
            description="Mention matches by resolution outcome",
            unit="1"
        )
        logger.info("Created counter: mention_resolution")

        messages_parsed = meter.create_counter(
            name="messages_parsed",
            description="Number of message bodies parsed for mentions",
            unit="1"
        )
        logger.info("Created counter: messages_parsed")

        return SimpleNamespace(
            mention_resolution=mention_resolution,
            messages_parsed=messages_parsed
        )

    def setup_tracing(self):
        """Set up OpenTelemetry tracing"""
        logger.info("Setting up OpenTelemetry tracing...")

        otlp_span_exporter = OTLPSpanExporter(
            endpoint=self.endpoint,
            insecure=True
        )
        span_processor = BatchSpanProcessor(otlp_span_exporter)

        trace_provider = TracerProvider(resource=self.resource)
        trace_provider.add_span_processor(span_processor)
        trace.set_tracer_provider(trace_provider)
        logger.info("Tracer provider configured with OTLP exporter")

        return trace.get_tracer("guildmentions_tracer")

    @contextmanager
    def create_span(self, name, kind=SpanKind.INTERNAL, attributes=None):
        """Create a span as a context manager for tracing operations"""
        if attributes is None:
            attributes = {}

        span = self.tracer.start_span(name, kind=kind, attributes=attributes)
        try:
            with trace.use_span(span, end_on_exit=False):
                yield span
                span.set_status(Status(StatusCode.OK))
                span.end()
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR))
            span.record_exception(e)
            span.end()
            raise

    def track_mention_resolution(self, outcome: str, mention_type: str):
        """Count one mention match by how it resolved (resolved, miss, malformed)"""
        try:
            self.metrics.mention_resolution.add(1, {"outcome": outcome, "mention_type": mention_type})
        except Exception as e:
            logger.error(f"Error tracking mention resolution: {e}", exc_info=True)

    def increment_parsed_counter(self, guild_id: int | None):
        """Count a parsed message body, attributed to its guild or to DMs"""
        try:
            self.metrics.messages_parsed.add(1, {"guild_id": str(guild_id) if guild_id else "dm"})
        except Exception as e:
            logger.error(f"Error incrementing parsed counter: {e}", exc_info=True)
