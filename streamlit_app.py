from __future__ import annotations

from pathlib import Path

import streamlit as st

from motion_state.character import CharacterAnimator, CharacterConfig
from motion_state.classifier import PRESETS, ClassifierConfig
from motion_state.csv_io import load_samples
from motion_state.models import DEFAULT_TZ, Sample
from motion_state.replay import TimelineRow, classify_track, find_moving_intervals, sum_intervals
from motion_state.timeutils import dt_from_epoch_ms


@st.cache_data(show_spinner=False)
def _load_samples(path_csv: str, mtime: float) -> list[Sample]:
    _ = mtime  # part of cache key so updated files reload automatically
    samples, _ = load_samples(path_csv)
    return samples


def _character_at(timeline: list[TimelineRow], idx: int, character_cfg: CharacterConfig) -> CharacterAnimator:
    """Re-run the animator over the timeline up to (and including) row idx."""

    animator = CharacterAnimator(character_cfg, now=timeline[0].sample.geo_time_s)
    moving = False
    for row in timeline[: idx + 1]:
        now = row.sample.geo_time_s
        if row.is_moving != moving:
            moving = row.is_moving
            animator.on_motion_change(moving, now)
        animator.tick(now)
    return animator


def main() -> None:
    st.set_page_config(page_title="RunningTungTung：移动状态回放", layout="wide")
    st.title("RunningTungTung：用定位轨迹回放角色的移动状态")

    with st.sidebar:
        st.subheader("数据与时区")
        tz_name = st.text_input("时区（IANA）", value=DEFAULT_TZ)
        path_csv = st.text_input("Path.csv 路径", value="Path.csv")

        st.subheader("分类器参数")
        preset = st.selectbox("预设", options=sorted(PRESETS), index=sorted(PRESETS).index("walking"))
        base = PRESETS[preset]()
        speed_threshold = st.number_input("speed_threshold（m/s）", value=base.speed_threshold_mps, step=0.1)
        distance_threshold = st.number_input("distance_threshold（米）", value=base.distance_threshold_m, step=0.5)
        decay_seconds = st.number_input("decay_seconds（秒）", value=base.decay_seconds, step=0.5)

        with st.expander("角色动画（通常不用改）", expanded=False):
            frame_interval_s = st.number_input("frame_interval_s", value=0.5, step=0.1)
            sleep_after_seconds = st.number_input("sleep_after_seconds", value=60.0, step=10.0)
            min_duration_seconds = st.number_input("min_duration_seconds（过滤短区间）", value=0.0, step=1.0)

    p = Path(path_csv)
    if not p.exists():
        st.error(f"找不到文件：{path_csv!r}。可以先运行 scripts/generate_sample_path_csv.py 生成示例数据。")
        return

    try:
        cfg = ClassifierConfig(
            speed_threshold_mps=float(speed_threshold),
            distance_threshold_m=float(distance_threshold),
            decay_seconds=float(decay_seconds),
        )
        character_cfg = CharacterConfig(
            frame_interval_s=float(frame_interval_s),
            sleep_after_seconds=float(sleep_after_seconds),
        )
        samples = _load_samples(path_csv, p.stat().st_mtime)
    except Exception as exc:
        st.exception(exc)
        return

    if not samples:
        st.warning("CSV中没有可用的采样点。")
        return

    timeline = classify_track(samples, cfg)
    intervals = find_moving_intervals(timeline, tz_name, min_duration_s=float(min_duration_seconds))
    total = sum_intervals(intervals)

    st.subheader("汇总")
    c1, c2, c3 = st.columns(3)
    c1.metric("移动总时长", total.total_hhmmss)
    c2.metric("移动区间数", str(total.intervals))
    c3.metric("移动距离（米）", f"{total.total_distance_m:.1f}")

    st.subheader("移动状态时间线")
    st.line_chart(
        {
            "is_moving": [int(r.is_moving) for r in timeline],
            "movement_detected": [int(r.movement_detected) for r in timeline],
        },
        height=220,
    )

    st.subheader("角色")
    idx = st.slider("采样点", min_value=0, max_value=len(timeline) - 1, value=0) if len(timeline) > 1 else 0
    animator = _character_at(timeline, idx, character_cfg)
    row = timeline[idx]
    c1, c2, c3 = st.columns(3)
    c1.metric("时间", dt_from_epoch_ms(row.sample.geo_time_ms, tz_name).strftime("%H:%M:%S"))
    c2.metric("状态", animator.state.value)
    c3.metric("帧", animator.image_name)
    st.caption(f"判定依据：{row.reason}，速度={row.sample.speed_mps} m/s")

    st.subheader("移动区间明细")
    rows = [
        {
            "interval_id": iv.interval_id,
            "start_time": iv.start_dt.isoformat(sep=" "),
            "end_time": iv.end_dt.isoformat(sep=" "),
            "duration_seconds": round(iv.duration_seconds, 3),
            "samples": iv.samples,
            "distance_m": round(iv.distance_m, 1),
        }
        for iv in intervals
    ]
    st.dataframe(rows, use_container_width=True, height=420)

    st.caption(
        "说明：有效速度大于阈值即判定为移动；速度无效时用相邻两点距离兜底；"
        "停止检测到移动后保持 decay_seconds 再切换为静止。"
    )


if __name__ == "__main__":
    main()
