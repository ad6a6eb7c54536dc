"""Tests for subpixreg.registration.benchmark."""

from subpixreg.registration.benchmark import (
    BenchmarkResult,
    print_benchmark_table,
    run_benchmark,
)


class TestRunBenchmark:
    """Tests for run_benchmark sweep."""

    def test_results_per_method_and_factor(self):
        results = run_benchmark(shape=(64, 64), upsample_factors=[1, 10], n_shifts=3)

        assert len(results) == 4
        assert all(isinstance(r, BenchmarkResult) for r in results)
        assert {(r.method, r.upsample_factor) for r in results} == {
            ("numpy", 1),
            ("numpy", 10),
            ("skimage", 1),
            ("skimage", 10),
        }

    def test_upsampling_reduces_error(self):
        results = run_benchmark(
            shape=(64, 64), upsample_factors=[1, 10], methods=["numpy"], n_shifts=3
        )
        by_factor = {r.upsample_factor: r for r in results}

        assert by_factor[10].shift_error <= by_factor[1].shift_error
        assert by_factor[10].shift_error < 0.1

    def test_print_table(self, capsys):
        print_benchmark_table(
            [BenchmarkResult(method="numpy", upsample_factor=5, time_sec=0.001, shift_error=0.02)]
        )
        out = capsys.readouterr().out
        assert "| numpy" in out
        assert "0.0200" in out
