"""
Utilities Module for the Commitment Engine
Logging setup, performance monitoring and result export
"""

import json
import logging
import platform
import time
from dataclasses import asdict, dataclass, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import psutil

from tcr.substrate import Fr, G1Point


@dataclass
class PerformanceMetrics:
    operation: str
    duration_seconds: float
    cpu_percent: float
    memory_mb: float
    timestamp: float
    additional_data: Dict[str, Any] = None


def setup_logging(log_level: str = "INFO", log_file: Optional[Path] = None,
                  log_dir: Path = Path("logs")):
    """Setup logging to a timestamped file and the console"""
    if log_file is None:
        log_file = Path(log_dir) / \
            f"direct_tcr_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Clear existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )

    # numba and galois are chatty at DEBUG
    logging.getLogger("numba").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized. Log file: {log_file}")

    return logger


class PerformanceMonitor:
    """Performance monitor with context manager support"""

    def __init__(self):
        self.metrics: List[PerformanceMetrics] = []
        self.process = psutil.Process()

    def start_operation(self, operation_name: str) -> 'OperationContext':
        """Start monitoring an operation - returns context manager"""
        return OperationContext(self, operation_name)

    def record_metric(self, metric: PerformanceMetrics):
        self.metrics.append(metric)

    def get_summary(self) -> Dict[str, Any]:
        """Per-operation statistics over every recorded metric"""
        if not self.metrics:
            return {
                'total_operations': 0,
                'total_duration': 0.0,
                'operations': {}
            }

        operation_groups: Dict[str, List[PerformanceMetrics]] = {}
        for metric in self.metrics:
            operation_groups.setdefault(metric.operation, []).append(metric)

        summary = {
            'total_operations': len(self.metrics),
            'operations': {}
        }

        for op_name, metrics in operation_groups.items():
            durations = [m.duration_seconds for m in metrics]
            memory_usages = [m.memory_mb for m in metrics if m.memory_mb > 0]
            cpu_usages = [m.cpu_percent for m in metrics if m.cpu_percent > 0]
            total = sum(durations)

            summary['operations'][op_name] = {
                'count': len(metrics),
                'total_duration': total,
                'avg_duration': float(np.mean(durations)),
                'median_duration': float(np.median(durations)),
                'min_duration': min(durations),
                'max_duration': max(durations),
                'std_duration': float(np.std(durations)) if len(durations) > 1 else 0.0,
                'avg_cpu_percent': float(np.mean(cpu_usages)) if cpu_usages else 0.0,
                'avg_memory_mb': float(np.mean(memory_usages)) if memory_usages else 0.0,
                'peak_memory_mb': max(memory_usages) if memory_usages else 0.0,
                'throughput_ops_per_sec': len(metrics) / total if total > 0 else 0.0
            }

        summary['total_duration'] = sum(
            op_data['total_duration']
            for op_data in summary['operations'].values()
        )

        return summary

    def save_metrics(self, filepath: Path):
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        metrics_data = {
            'metrics': [asdict(m) for m in self.metrics],
            'summary': self.get_summary(),
            'system_info': get_system_info(),
            'timestamp': datetime.now().isoformat()
        }

        with open(filepath, 'w') as f:
            json.dump(metrics_data, f, indent=2, default=str)

    def reset(self):
        self.metrics.clear()


class OperationContext:
    """Context manager recording duration, CPU and memory of one operation"""

    def __init__(self, monitor: PerformanceMonitor, operation_name: str):
        self.monitor = monitor
        self.operation_name = operation_name
        self.start_time = None
        self.start_memory = 0.0

    def __enter__(self):
        # Prime the CPU counter; the reading at exit covers this interval
        self.monitor.process.cpu_percent()
        self.start_memory = self.monitor.process.memory_info().rss / 1024 / 1024
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.perf_counter() - self.start_time

        cpu_percent = self.monitor.process.cpu_percent()
        end_memory = self.monitor.process.memory_info().rss / 1024 / 1024

        metric = PerformanceMetrics(
            operation=self.operation_name,
            duration_seconds=duration,
            cpu_percent=cpu_percent,
            memory_mb=max(self.start_memory, end_memory),
            timestamp=time.time(),
            additional_data={'exception': exc_type is not None}
        )

        self.monitor.record_metric(metric)


def get_system_info() -> Dict[str, Any]:
    """Host information recorded next to benchmark results"""
    vm = psutil.virtual_memory()
    cpu_freq = psutil.cpu_freq()
    return {
        'platform': platform.platform(),
        'processor': platform.processor(),
        'python_version': platform.python_version(),
        'machine': platform.machine(),
        'cpu_count_physical': psutil.cpu_count(logical=False),
        'cpu_count_logical': psutil.cpu_count(logical=True),
        'cpu_freq_max_mhz': cpu_freq.max if cpu_freq else None,
        'total_memory_gb': round(vm.total / 1024 / 1024 / 1024, 2),
        'timestamp': datetime.now().isoformat()
    }


def to_serializable(obj: Any) -> Any:
    """Convert points, scalars and result dataclasses into JSON values"""
    if isinstance(obj, G1Point):
        return obj.hex()
    elif isinstance(obj, Fr):
        return hex(int(obj))
    elif hasattr(obj, 'to_dict'):
        return obj.to_dict()
    elif is_dataclass(obj) and not isinstance(obj, type):
        return {k: to_serializable(getattr(obj, k)) for k in obj.__dataclass_fields__
                if obj.__dataclass_fields__[k].repr}
    elif isinstance(obj, dict):
        return {str(k): to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_serializable(item) for item in obj]
    elif isinstance(obj, (np.integer, np.floating)):
        return obj.item()
    elif isinstance(obj, bytes):
        return obj.hex()
    elif isinstance(obj, Path):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def save_results(results: Dict[str, Any], filepath: Path):
    """Save results to JSON with a human-readable summary next to it"""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    enhanced_results = {
        'metadata': {
            'generated_at': datetime.now().isoformat(),
            'system_info': get_system_info(),
            'file_path': str(filepath)
        },
        'data': to_serializable(results)
    }

    with open(filepath, 'w') as f:
        json.dump(enhanced_results, f, indent=2, default=str)

    summary_path = filepath.parent / f"{filepath.stem}_summary.txt"
    with open(summary_path, 'w') as f:
        f.write(create_results_summary(results))

    logging.info(f"Results saved to {filepath}")
    logging.info(f"Summary saved to {summary_path}")


def create_results_summary(results: Dict[str, Any]) -> str:
    summary = []
    summary.append("=" * 80)
    summary.append("DIRECT-TCR COMMITMENT ENGINE - RESULTS SUMMARY")
    summary.append("=" * 80)
    summary.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    summary.append("")

    if 'configuration' in results:
        summary.append("CONFIGURATION:")
        for key, value in results['configuration'].items():
            summary.append(f"  {key}: {value}")
        summary.append("")

    if 'participants' in results:
        participants = results['participants']
        summary.append(f"PARTICIPANTS: {len(participants)}")
        summary.append("")

    if 'benchmarks' in results:
        summary.append("BENCHMARK RESULTS:")
        for bench_name, bench_data in results['benchmarks'].items():
            if isinstance(bench_data, dict) and 'avg_duration' in bench_data:
                summary.append(
                    f"  {bench_name}: {format_duration(bench_data['avg_duration'])} avg "
                    f"over {bench_data['count']} runs")
            else:
                summary.append(f"  {bench_name}: {bench_data}")
        summary.append("")

    summary.append("=" * 80)
    return "\n".join(summary)


def create_performance_report(metrics: PerformanceMonitor) -> str:
    """Create detailed performance report from metrics"""
    summary = metrics.get_summary()

    report = []
    report.append("=" * 80)
    report.append("DIRECT-TCR COMMITMENT ENGINE - PERFORMANCE REPORT")
    report.append("=" * 80)
    report.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    report.append(f"Total Operations: {summary.get('total_operations', 0)}")
    report.append(f"Total Duration: {summary.get('total_duration', 0):.3f}s")
    report.append("")

    if summary['operations']:
        report.append("OPERATION BREAKDOWN:")
        report.append("-" * 60)

        for op_name, op_data in summary['operations'].items():
            report.append(f"\n{op_name.upper()}:")
            report.append(f"  Executions: {op_data['count']}")
            report.append(f"  Total Time: {op_data['total_duration']:.3f}s")
            report.append(f"  Average Time: {format_duration(op_data['avg_duration'])}")
            report.append(
                f"  Min/Max Time: {format_duration(op_data['min_duration'])} / "
                f"{format_duration(op_data['max_duration'])}")
            report.append(f"  Std Deviation: {op_data['std_duration']:.4f}s")
            report.append(
                f"  Throughput: {op_data['throughput_ops_per_sec']:.2f} ops/sec")

            if op_data['avg_cpu_percent'] > 0:
                report.append(
                    f"  Average CPU: {op_data['avg_cpu_percent']:.1f}%")
            if op_data['peak_memory_mb'] > 0:
                report.append(
                    f"  Peak Memory: {op_data['peak_memory_mb']:.1f} MB")
    else:
        report.append("No performance data available.")

    report.append("")
    report.append("=" * 80)
    return "\n".join(report)


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format"""
    if seconds < 1:
        return f"{seconds*1000:.1f}ms"
    elif seconds < 60:
        return f"{seconds:.2f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.1f}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        secs = seconds % 60
        return f"{hours}h {minutes}m {secs:.1f}s"


__all__ = [
    'PerformanceMetrics',
    'PerformanceMonitor',
    'OperationContext',
    'setup_logging',
    'get_system_info',
    'to_serializable',
    'save_results',
    'create_results_summary',
    'create_performance_report',
    'format_duration',
]
