"""Command-line interface for motion_state.

Run:
    python -m motion_state replay --csv Path.csv
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict
from time import sleep

from motion_state.character import CharacterAnimator
from motion_state.classifier import PRESETS, ClassifierConfig
from motion_state.csv_io import load_samples
from motion_state.dispatch import QueuedDispatcher
from motion_state.inspect import inspect_samples
from motion_state.models import DEFAULT_TZ, Sample
from motion_state.monitor import LocationMotionMonitor
from motion_state.provider import ReplayLocationProvider
from motion_state.replay import (
    classify_track,
    find_moving_intervals,
    sum_intervals,
    write_intervals_csv,
    write_timeline_csv,
)
from motion_state.timeutils import dt_from_epoch_ms, parse_dt


def _config_from_args(args: argparse.Namespace) -> ClassifierConfig:
    base = PRESETS[args.preset]()
    return ClassifierConfig(
        speed_threshold_mps=base.speed_threshold_mps if args.speed_threshold is None else args.speed_threshold,
        distance_threshold_m=base.distance_threshold_m if args.distance_threshold is None else args.distance_threshold,
        decay_seconds=base.decay_seconds if args.decay_seconds is None else args.decay_seconds,
    )


def _filter_range(samples: list[Sample], args: argparse.Namespace) -> list[Sample]:
    if args.range_start is None and args.range_end is None:
        return samples
    start_ms = parse_dt(args.range_start, args.tz).timestamp() * 1000 if args.range_start else None
    end_ms = parse_dt(args.range_end, args.tz).timestamp() * 1000 if args.range_end else None
    if start_ms is not None:
        samples = [s for s in samples if s.geo_time_ms >= int(start_ms)]
    if end_ms is not None:
        samples = [s for s in samples if s.geo_time_ms <= int(end_ms)]
    return samples


def _cmd_inspect(args: argparse.Namespace) -> int:
    samples, summary = load_samples(args.csv)
    res = inspect_samples(samples)

    print("### CSV字段")
    print(", ".join(summary.fieldnames))
    print()

    print("### 行数")
    print(f"total_rows={summary.rows_total}, parsed={summary.rows_parsed}, skipped={summary.rows_skipped}")
    print()

    if res.min_time_ms is not None and res.max_time_ms is not None:
        print("### 时间范围（本地时区）")
        start = dt_from_epoch_ms(res.min_time_ms, args.tz)
        end = dt_from_epoch_ms(res.max_time_ms, args.tz)
        print(f"start={start.isoformat(sep=' ')}, end={end.isoformat(sep=' ')}")
        print()

    if res.delta is not None:
        print("### 采样间隔（秒）")
        print(
            f"count={res.delta.count}, min={res.delta.min_s:.3f}, median={res.delta.median_s:.3f}, "
            f"p95={res.delta.p95_s:.3f}, max={res.delta.max_s:.3f}"
        )
        print()

    print("### 速度读数")
    print(f"valid={res.valid_speed_samples}/{res.samples} ({100.0 * res.valid_speed_ratio:.1f}%), max={res.max_speed_mps}")
    print(f"median_horizontal_accuracy_m={res.median_accuracy_m}")
    print()

    print("### 重复时间戳（geoTime重复）")
    print(res.duplicates_geo_time)
    print()

    if args.json:
        import json

        payload = asdict(res) | {
            "valid_speed_ratio": res.valid_speed_ratio,
            "rows_total": summary.rows_total,
            "rows_parsed": summary.rows_parsed,
            "rows_skipped": summary.rows_skipped,
            "fieldnames": list(summary.fieldnames),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def _cmd_replay(args: argparse.Namespace) -> int:
    samples, _ = load_samples(args.csv)
    samples = _filter_range(samples, args)
    cfg = _config_from_args(args)

    timeline = classify_track(samples, cfg)
    intervals = find_moving_intervals(timeline, args.tz, min_duration_s=args.min_duration_seconds)
    write_intervals_csv(intervals, args.out)
    if args.timeline:
        write_timeline_csv(timeline, args.timeline, args.tz)

    total = sum_intervals(intervals)
    print(
        f"参数：speed>{cfg.speed_threshold_mps}m/s, distance>{cfg.distance_threshold_m}m, "
        f"decay={cfg.decay_seconds}s"
    )
    print(
        f"识别到移动区间={total.intervals} 段，合计={total.total_hhmmss}（{total.total_seconds:.1f}s），"
        f"距离={total.total_distance_m:.1f}m"
    )
    print(f"已导出：{args.out}")
    if args.timeline:
        print(f"已导出：{args.timeline}")
    return 0


def _cmd_live(args: argparse.Namespace) -> int:
    samples, _ = load_samples(args.csv)
    samples = sorted(_filter_range(samples, args), key=lambda s: s.geo_time_ms)
    if not samples:
        print("没有可回放的采样点。", file=sys.stderr)
        return 1

    provider = ReplayLocationProvider(samples)
    dispatcher = QueuedDispatcher()
    monitor = LocationMotionMonitor(provider, config=_config_from_args(args), dispatcher=dispatcher)
    animator = CharacterAnimator(now=samples[0].geo_time_s)
    clock = {"now": samples[0].geo_time_s}

    def _on_change(is_moving: bool) -> None:
        animator.on_motion_change(is_moving, clock["now"])
        t = dt_from_epoch_ms(int(clock["now"] * 1000), args.tz).isoformat(sep=" ")
        print(f"{t}  is_moving={is_moving}  character={animator.state.value}  frame={animator.image_name}", flush=True)

    monitor.subscribe(_on_change)
    monitor.request_authorization()
    monitor.start()

    try:
        for s in samples:
            clock["now"] = s.geo_time_s
            provider.pump()
            dispatcher.drain()
            animator.tick(clock["now"])
            if args.interval > 0:
                sleep(args.interval)
    except KeyboardInterrupt:
        print("\n收到中断信号：停止回放。", file=sys.stderr, flush=True)
    finally:
        monitor.stop()
    return 0


def _add_classifier_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--preset", type=str, default="walking", choices=sorted(PRESETS), help="阈值预设")
    p.add_argument("--speed-threshold", type=float, default=None, help="速度阈值（m/s），有效速度大于该值即判定为移动")
    p.add_argument(
        "--distance-threshold",
        type=float,
        default=None,
        help="距离阈值（米）：速度无效或未超阈值时，相邻两点距离大于该值判定为移动",
    )
    p.add_argument("--decay-seconds", type=float, default=None, help="最后一次检测到移动后，继续保持“移动”的秒数（防抖）")
    p.add_argument("--range-start", type=str, default=None, help="仅使用该时间之后的数据（例如 2025-09-05 00:00:00）")
    p.add_argument("--range-end", type=str, default=None, help="仅使用该时间之前的数据（例如 2025-09-05 23:59:59）")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="motion_state")
    p.add_argument("-v", "--verbose", action="store_true", help="输出调试日志（状态切换等）")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_ins = sub.add_parser("inspect", help="分析轨迹CSV的时间范围/采样间隔/速度读数，便于调整阈值")
    p_ins.add_argument("--csv", type=str, default="Path.csv", help="输入CSV路径")
    p_ins.add_argument("--tz", type=str, default=DEFAULT_TZ, help="时区（IANA）")
    p_ins.add_argument("--json", action="store_true", help="额外输出JSON（便于后处理）")
    p_ins.set_defaults(func=_cmd_inspect)

    p_rep = sub.add_parser("replay", help="用分类器回放轨迹，导出移动区间 intervals.csv")
    p_rep.add_argument("--csv", type=str, default="Path.csv", help="输入CSV路径")
    p_rep.add_argument("--tz", type=str, default=DEFAULT_TZ, help="时区（IANA）")
    _add_classifier_args(p_rep)
    p_rep.add_argument("--min-duration-seconds", type=float, default=0.0, help="过滤小于该时长的移动区间")
    p_rep.add_argument("--out", type=str, default="intervals.csv", help="输出 intervals.csv 路径")
    p_rep.add_argument("--timeline", type=str, default=None, help="可选：导出逐点分类结果CSV")
    p_rep.set_defaults(func=_cmd_replay)

    p_live = sub.add_parser("live", help="模拟实时定位：逐点推送并打印状态切换与角色帧")
    p_live.add_argument("--csv", type=str, default="Path.csv", help="输入CSV路径")
    p_live.add_argument("--tz", type=str, default=DEFAULT_TZ, help="时区（IANA）")
    _add_classifier_args(p_live)
    p_live.add_argument("--interval", type=float, default=0.0, help="每推送一个点后暂停的秒数（0 表示不暂停）")
    p_live.set_defaults(func=_cmd_live)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
