import json

from tcr import Fr, G1Point, Witness, genproof
from utils.utils import (
    PerformanceMonitor,
    create_performance_report,
    format_duration,
    save_results,
    to_serializable,
)


class TestSerialization:

    def test_points_and_scalars(self):
        assert to_serializable(G1Point.identity()) == "00" * 64
        assert to_serializable(Fr(255)) == "0xff"

    def test_witness_secrets_are_not_exported(self):
        assert to_serializable(Witness(x0=1, x1=2, x2=3, b=1)) == {}

    def test_proof_uses_wire_encoding(self, statement, witness, rng):
        proof = genproof(witness, statement, rng)
        assert to_serializable({'proof': proof}) == {'proof': proof.to_dict()}

    def test_save_results_writes_json_and_summary(self, tmp_path, statement):
        path = tmp_path / "out" / "report.json"
        save_results({'statement': statement, 'participants': []}, path)

        data = json.loads(path.read_text())
        assert data['data']['statement'] == statement.to_dict()
        assert "PARTICIPANTS: 0" in (tmp_path / "out" / "report_summary.txt").read_text()


class TestPerformanceMonitor:

    def test_summary_groups_by_operation(self):
        monitor = PerformanceMonitor()
        for _ in range(3):
            with monitor.start_operation("deposit"):
                pass
        with monitor.start_operation("vote1"):
            pass

        summary = monitor.get_summary()
        assert summary['total_operations'] == 4
        assert summary['operations']['deposit']['count'] == 3
        assert "DEPOSIT" in create_performance_report(monitor)

    def test_empty_monitor(self):
        assert PerformanceMonitor().get_summary()['total_operations'] == 0

    def test_format_duration(self):
        assert format_duration(0.0125) == "12.5ms"
        assert format_duration(75) == "1m 15.0s"
