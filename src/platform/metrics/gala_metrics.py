from prometheus_client import Counter, Gauge, Histogram


class GalaMetrics:
    """
    Change journal and live sync metrics

    Exposed at /metrics.
    """

    def __init__(self) -> None:
        # ========== Mutation Metrics ==========
        self.mutations = Counter(
            'gala_mutations_total',
            'Mutating requests by outcome',
            ['operation', 'outcome'],  # outcome: committed/rejected/failed
        )

        self.mutation_duration = Histogram(
            'gala_mutation_duration_seconds',
            'Time from gate acquisition to broadcast',
            ['operation'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
        )

        self.gate_wait_duration = Histogram(
            'gala_gate_wait_seconds',
            'Time spent waiting for the serial transaction gate',
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
        )

        # ========== Journal Metrics ==========
        self.journal_entries = Counter(
            'gala_journal_entries_total',
            'Journal rows appended',
        )

        self.journal_sequence = Gauge(
            'gala_journal_sequence',
            'Highest logged journal sequence number',
        )

        # ========== Live Sync Metrics ==========
        self.live_subscribers = Gauge(
            'gala_live_subscribers',
            'Registered journal subscribers',
        )

        self.subscriber_evictions = Counter(
            'gala_subscriber_evictions_total',
            'Subscribers dropped because their outbound buffer was full',
        )

    def record_mutation(self, *, operation: str, outcome: str) -> None:
        self.mutations.labels(operation=operation, outcome=outcome).inc()

    def record_journal_append(self, *, sequence: int) -> None:
        self.journal_entries.inc()
        self.journal_sequence.set(sequence)


# Global metrics instance
metrics = GalaMetrics()
