"""Tests for the metrics sink."""

from prometheus_client import CONTENT_TYPE_LATEST

from shortlink.metrics import MetricsSink


class TestMetricsSink:
    """Test counter and histogram rendering."""

    def test_empty(self):
        assert MetricsSink().render() == ""

    def test_increment(self):
        metrics = MetricsSink()

        metrics.increment("db.connection_timeout")
        metrics.increment("db.connection_timeout", 2)

        rendered = metrics.render()
        assert "# TYPE db_connection_timeout_total counter" in rendered
        assert "db_connection_timeout_total 3.0" in rendered

    def test_labels(self):
        metrics = MetricsSink()

        metrics.increment("http_requests", method="GET", status="200")
        metrics.increment("http_requests", status="404", method="GET")
        metrics.increment("http_requests", method="GET", status="200")

        rendered = metrics.render()
        assert 'http_requests_total{method="GET",status="200"} 2.0' in rendered
        assert 'http_requests_total{method="GET",status="404"} 1.0' in rendered
        assert rendered.count("# TYPE http_requests_total counter") == 1

    def test_label_escaping(self):
        metrics = MetricsSink()

        metrics.increment("events", detail='say "hi"')

        assert 'events_total{detail="say \\"hi\\""} 1.0' in metrics.render()

    def test_total_suffix_not_doubled(self):
        metrics = MetricsSink()

        metrics.increment("http_requests_total")

        assert "http_requests_total 1.0" in metrics.render()
        assert "http_requests_total_total" not in metrics.render()

    def test_namespace(self):
        metrics = MetricsSink(namespace="shortlink")

        metrics.increment("link-created")

        assert "shortlink_link_created_total 1.0" in metrics.render()

    def test_histogram(self):
        metrics = MetricsSink()

        metrics.observe("http_requests_duration_seconds", 0.02, method="GET")
        metrics.observe("http_requests_duration_seconds", 0.3, method="GET")

        rendered = metrics.render()
        assert "# TYPE http_requests_duration_seconds histogram" in rendered
        assert 'http_requests_duration_seconds_count{method="GET"} 2.0' in rendered
        assert 'http_requests_duration_seconds_bucket{method="GET",le="0.025"} 1.0' in rendered

    def test_instances_are_isolated(self):
        first = MetricsSink()
        second = MetricsSink()

        first.increment("db.connection_timeout")

        assert second.render() == ""

    def test_content_type(self):
        assert MetricsSink().content_type == CONTENT_TYPE_LATEST
