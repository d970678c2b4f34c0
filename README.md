# mavplan

Building blocks for planning paths of micro aerial vehicles (MAVs).

## What is inside

- `mavplan.utils`: `TrajectoryPoint`, a dataclass with `position`, `velocity`, `acceleration`, `orientation` (a quaternion stored as w, x, y, z) and `time_from_start_ns`. It has `set_from_yaw(yaw)` and `yaw()`. The module also has `compute_path_length(path)` and `rand_m_to_n(m, n, rng=None)`, which draws a uniform number between `m` and `n`.
- `mavplan.constraints`: `PhysicalConstraints` holds `v_max`, `a_max`, `yaw_rate_max`, `robot_radius` and `sampling_dt`. `update_from_params(params)` overrides the fields named in a mapping.
- `mavplan.color`: `percent_to_rainbow_color(h)` maps a fraction to a `ColorRGBA` on a rainbow scale, with alpha 0.5.
- `mavplan.path_utils`: `retime_trajectory_monotonically_increasing` and `retime_trajectory_with_start_time_and_dt` rewrite the timestamps of a list of points in place.
- `mavplan.semaphore`: `Semaphore` is a counting semaphore with `notify()`, `wait_for(sec)` and `shutdown()`. A shutdown releases every waiter.
- `mavplan.visualization`: `create_marker_for_path` builds a line-strip `Marker`. It subsamples the path to about 1000 points and drops points beyond ±1e4. `create_marker_for_waypoints` builds a sphere-list `Marker`.
- `mavplan.recolor`: `TrajectoryRecolor.marker_callback(markers)` gives incoming markers rainbow colours by arrival order and returns the growing cache. It can also pass the cache to a `publish` callable.
- `mavplan.yaw_policy`: `YawPolicy` sets the yaw along a path. The `PolicyType` choices are `FROM_PLAN`, `VELOCITY_VECTOR`, `ANTICIPATE_VELOCITY_VECTOR`, `POINT_FACING` and `CONSTANT`. The policy respects a maximum yaw rate once `sampling_dt` and `yaw_rate_max` are set. Use `apply_policy_in_place(path)` to change the path itself, or `apply_policy(path)` to get a changed copy.
- `mavplan.resampling`: `compute_time_velocity_ramp` estimates the travel time under a trapezoidal velocity profile. `resample_waypoints_from_visibility_graph(num_segments, constraints, waypoints)` returns `num_segments + 1` points that split the path into pieces of equal estimated time.
- `mavplan.shotgun`: `ShotgunPlanner.shoot_particles(num_particles, max_steps, start, goal)` walks random particles through a sparse `EsdfGrid`. It returns a `ShotgunResult` with the reachable point closest to the goal and the coarse path to it. `set_seed` makes a run repeatable.
- `mavplan.goal_selector`: `GoalPointSelector.select_next_goal(global_goal, current_goal, current_pose)` picks the next goal to try, or returns `None`. The `Strategy` choices are none, random, or local exploration over a `TsdfGrid` with an optional gain function.
- `mavplan.edit_button`, `mavplan.pose_widget`, `mavplan.interactive_markers`, `mavplan.planning_panel`: the state and logic of a planning panel.
  - `EditButton` toggles between editing and not editing.
  - `PoseWidget` holds x, y, z and yaw in degrees as text cells.
  - `InteractiveMarkerServer` and `PlanningInteractiveMarkers` manage the movable set-pose marker and the labelled static markers.
  - `PlanningPanel` ties these together with the namespace, planner name, odometry topic, `save()` and `load()`. `validate_name` checks resource names.

## Example

```python
from mavplan.constraints import PhysicalConstraints
from mavplan.utils import TrajectoryPoint
from mavplan.yaw_policy import PolicyType, YawPolicy

constraints = PhysicalConstraints()
path = [
    TrajectoryPoint(position=[x * 0.1, 0.0, 1.0], velocity=[0.0, 1.0, 0.0])
    for x in range(20)
]

policy = YawPolicy(PolicyType.VELOCITY_VECTOR)
policy.set_physical_constraints(constraints)
policy.apply_policy_in_place(path)
# The yaw turns toward +y no faster than yaw_rate_max * sampling_dt per point.
print([round(p.yaw(), 4) for p in path[:3]])
```

## What it does not do

- There is no command-line tool and no benchmark runner.
- The package does not build ESDF or TSDF maps from sensor data. `EsdfGrid` and `TsdfGrid` only hold voxel values that you set.
- It has no trajectory optimizer and no global planner.
- The planning panel draws no window and opens no network connection. It calls the `publish` and `call_service` functions you give it. Marker "publishing" only updates the in-memory `InteractiveMarkerServer`.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```