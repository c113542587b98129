"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for the simulation run."""

    # World
    world_seed: int = 42
    world_width: int = 800
    world_height: int = 600
    bounds_margin: float = 5.0             # Agents are clamped this far inside the play area
    flank_margin: float = 20.0             # Flank candidates are clamped this far inside

    # Timing
    frame_ms: float = 1000.0 / 60.0        # Nominal frame delta
    max_frame_ms: float = 100.0            # Slow frames are clamped to this delta
    max_frames: int = 3600

    # Agents
    agent_size: float = 18.0
    agent_speed: float = 50.0              # px per second
    detection_range: float = 100.0
    extended_range_mult: float = 1.2       # Hunters keep sight lock out to range * this

    # Speed multipliers per activity
    chase_speed_mult: float = 1.5
    flank_speed_mult: float = 1.3
    last_known_speed_mult: float = 1.2
    search_speed_mult: float = 0.8
    chase_return_speed_mult: float = 0.8
    guard_pursuit_speed_mult: float = 1.2
    guard_return_speed_mult: float = 0.6

    # AI timers (milliseconds, decremented by frame delta)
    hunt_duration_ms: float = 5000.0
    hunt_refresh_ms: float = 2500.0
    return_delay_ms: float = 2000.0
    search_dwell_ms: float = 1500.0

    # AI distances
    patrol_arrive_dist: float = 15.0
    guard_arrive_dist: float = 5.0
    chase_arrive_dist: float = 10.0
    last_known_arrive_dist: float = 25.0
    flank_orthogonal: float = 50.0
    flank_diagonal: float = 35.0
    flank_los_bonus: float = 100.0
    flank_proximity_base: float = 200.0
    search_orthogonal: float = 40.0
    search_diagonal: float = 30.0

    # Line of sight
    los_step: float = 3.0

    # Pathfinding
    cell_size: int = 15
    margin_cells: int = 1
    max_open_nodes: int = 1000
    path_refresh_chase_ms: float = 300.0
    path_refresh_ms: float = 500.0
    target_moved_dist: float = 30.0
    direct_approach_dist: float = 25.0
    waypoint_reached_dist: float = 12.0

    # Movement resolution
    escape_probe_distances: tuple = (2.0, 4.0, 8.0, 12.0, 16.0, 24.0, 32.0, 40.0)
    escape_anchor_step: float = 4.0
    escape_retry_ms: float = 100.0
    pursuit_probe_angles: tuple = (30.0, -30.0, 60.0, -60.0, 90.0, -90.0)
    stuck_move_epsilon: float = 1.0
    stuck_window_ms: float = 500.0

    # Target / contact
    target_size: float = 20.0
    target_speed: float = 150.0
    contact_cooldown_ms: float = 1000.0

    # Keys
    key_count: int = 3
    key_size: float = 16.0
    key_min_dist_player: float = 80.0
    key_min_dist_agents: float = 60.0
    key_min_dist_keys: float = 80.0
    key_max_attempts: int = 100
    key_reach_step: float = 10.0

    # Level
    level: int = 1

    # Server
    tick_rate: float = 1.0 / 60.0          # seconds between frames in server mode

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"
