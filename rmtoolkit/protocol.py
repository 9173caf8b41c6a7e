"""Referee serial protocol: command ids, enumerations and packed wire structures.

All multi-byte values are little-endian. Structures are packed without padding,
and bit fields are laid out contiguously from the least significant bit.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

__all__ = [
    "RefereeCmdId",
    "DataCmdId",
    "RobotId",
    "ClientId",
    "GraphOperation",
    "GraphColor",
    "GraphType",
    "SentryIntention",
    "PowerManagementStateMachine",
    "PowerManagementProtectionInfo",
    "PowerManagementResetReason",
    "PowerManagementTopology",
    "FrameHeader",
    "unpack_frame_header",
    "InteractiveDataHeader",
    "GraphConfig",
    "unpack_graph_config",
    "decode_payload",
    "FRAME_HEADER_LENGTH",
    "GRAPH_CONFIG_LENGTH",
]


class RefereeCmdId(IntEnum):
    GAME_STATUS_CMD = 0x0001
    GAME_RESULT_CMD = 0x0002
    GAME_ROBOT_HP_CMD = 0x0003
    DART_STATUS_CMD = 0x0004
    ICRA_ZONE_STATUS_CMD = 0x0005
    FIELD_EVENTS_CMD = 0x0101
    SUPPLY_PROJECTILE_ACTION_CMD = 0x0102
    REFEREE_WARNING_CMD = 0x0104
    DART_INFO_CMD = 0x0105
    ROBOT_STATUS_CMD = 0x0201
    POWER_HEAT_DATA_CMD = 0x0202
    ROBOT_POS_CMD = 0x0203
    BUFF_CMD = 0x0204
    AERIAL_ROBOT_ENERGY_CMD = 0x0205
    ROBOT_HURT_CMD = 0x0206
    SHOOT_DATA_CMD = 0x0207
    BULLET_REMAINING_CMD = 0x0208
    ROBOT_RFID_STATUS_CMD = 0x0209
    DART_CLIENT_CMD = 0x020A
    ROBOTS_POS_CMD = 0x020B
    RADAR_MARK_CMD = 0x020C
    SENTRY_INFO_CMD = 0x020D
    RADAR_INFO_CMD = 0x020E
    INTERACTIVE_DATA_CMD = 0x0301
    CUSTOM_CONTROLLER_CMD = 0x0302
    TARGET_POS_CMD = 0x0303
    ROBOT_COMMAND_CMD = 0x0304
    CLIENT_MAP_CMD = 0x0305
    CUSTOM_CLIENT_CMD = 0x0306
    MAP_SENTRY_CMD = 0x0307
    CUSTOM_TO_ROBOT_CMD = 0x0308
    ROBOT_TO_CUSTOM_CMD = 0x0309
    POWER_MANAGEMENT_SAMPLE_AND_STATUS_DATA_CMD = 0x8301
    POWER_MANAGEMENT_INITIALIZATION_EXCEPTION_CMD = 0x8302
    POWER_MANAGEMENT_SYSTEM_EXCEPTION_CMD = 0x8303
    POWER_MANAGEMENT_PROCESS_STACK_OVERFLOW_CMD = 0x8304
    POWER_MANAGEMENT_UNKNOWN_EXCEPTION_CMD = 0x8305


class DataCmdId(IntEnum):
    ROBOT_INTERACTIVE_CMD_MIN = 0x0200
    ROBOT_INTERACTIVE_CMD_MAX = 0x02FF
    CLIENT_GRAPH_DELETE_CMD = 0x0100
    CLIENT_GRAPH_SINGLE_CMD = 0x0101
    CLIENT_GRAPH_DOUBLE_CMD = 0x0102
    CLIENT_GRAPH_FIVE_CMD = 0x0103
    CLIENT_GRAPH_SEVEN_CMD = 0x0104
    CLIENT_CHARACTER_CMD = 0x0110
    SENTRY_CMD = 0x0120
    RADAR_CMD = 0x0121
    BULLET_NUM_SHARE_CMD = 0x0200
    SENTRY_TO_RADAR_CMD = 0x0201
    RADAR_TO_SENTRY_CMD = 0x0202


class RobotId(IntEnum):
    RED_HERO = 1
    RED_ENGINEER = 2
    RED_STANDARD_3 = 3
    RED_STANDARD_4 = 4
    RED_STANDARD_5 = 5
    RED_AERIAL = 6
    RED_SENTRY = 7
    RED_RADAR = 9
    RED_OUTPOST = 10
    RED_BASE = 11
    BLUE_HERO = 101
    BLUE_ENGINEER = 102
    BLUE_STANDARD_3 = 103
    BLUE_STANDARD_4 = 104
    BLUE_STANDARD_5 = 105
    BLUE_AERIAL = 106
    BLUE_SENTRY = 107
    BLUE_RADAR = 109
    BLUE_OUTPOST = 110
    BLUE_BASE = 111


class ClientId(IntEnum):
    RED_HERO_CLIENT = 0x0101
    RED_ENGINEER_CLIENT = 0x0102
    RED_STANDARD_3_CLIENT = 0x0103
    RED_STANDARD_4_CLIENT = 0x0104
    RED_STANDARD_5_CLIENT = 0x0105
    RED_AERIAL_CLIENT = 0x0106
    BLUE_HERO_CLIENT = 0x0165
    BLUE_ENGINEER_CLIENT = 0x0166
    BLUE_STANDARD_3_CLIENT = 0x0167
    BLUE_STANDARD_4_CLIENT = 0x0168
    BLUE_STANDARD_5_CLIENT = 0x0169
    BLUE_AERIAL_CLIENT = 0x016A
    REFEREE_SERVER = 0x8080


class GraphOperation(IntEnum):
    ADD = 1
    UPDATE = 2
    DELETE = 3


class GraphColor(IntEnum):
    MAIN_COLOR = 0
    YELLOW = 1
    GREEN = 2
    ORANGE = 3
    PURPLE = 4
    PINK = 5
    CYAN = 6
    BLACK = 7
    WHITE = 8


class GraphType(IntEnum):
    LINE = 0
    RECTANGLE = 1
    CIRCLE = 2
    ELLIPSE = 3
    ARC = 4
    FLOAT_NUM = 5
    INT_NUM = 6
    STRING = 7


class SentryIntention(IntEnum):
    ATTACK_IN = 1
    DEFEND_IN = 2
    MOVE_TO = 3


class PowerManagementStateMachine(IntEnum):
    CHARGE = 0
    BOOST = 1
    NORMAL = 2
    ALL_OFF = 3


class PowerManagementProtectionInfo(IntEnum):
    NO_PROBLEM = 0
    HIGH_CURRENT = 1
    REFEREE_POWER_DOWN = 2
    REFEREE_DISCONNECT = 3


class PowerManagementResetReason(IntEnum):
    POWER_ON = 1
    EXTERNAL_BUTTON = 2
    SOFT = 3
    INDEPENDENT_WATCHDOG = 4
    WINDOW_WATCHDOG = 5
    LOW_VOLTAGE = 6
    UNKNOWN = 7


class PowerManagementTopology(IntEnum):
    PASS_THROUGH = 0
    CHARGE_AND_BOOST = 1
    SWITCHES_ALL_OFF = 2


_FRAME_HEADER = struct.Struct("<BHBB")
_INTERACTIVE_HEADER = struct.Struct("<HHH")
_GRAPH_CONFIG = struct.Struct("<3sIII")

FRAME_HEADER_LENGTH = _FRAME_HEADER.size
GRAPH_CONFIG_LENGTH = _GRAPH_CONFIG.size


@dataclass
class FrameHeader:
    """Start of every referee frame: start byte, payload length, sequence and CRC-8."""

    sof: int = 0
    data_length: int = 0
    seq: int = 0
    crc_8: int = 0

    def pack(self) -> bytes:
        return _FRAME_HEADER.pack(self.sof, self.data_length, self.seq, self.crc_8)


def unpack_frame_header(data: bytes) -> FrameHeader:
    """Decode the first five bytes of ``data`` as a frame header."""
    if len(data) < FRAME_HEADER_LENGTH:
        raise ValueError(f"frame header needs {FRAME_HEADER_LENGTH} bytes, got {len(data)}")
    return FrameHeader(*_FRAME_HEADER.unpack_from(bytes(data)))


@dataclass
class InteractiveDataHeader:
    """Header of robot-to-robot and robot-to-client interactive data."""

    data_cmd_id: int = 0
    sender_id: int = 0
    receiver_id: int = 0

    def pack(self) -> bytes:
        return _INTERACTIVE_HEADER.pack(self.data_cmd_id, self.sender_id, self.receiver_id)


_GRAPH_BITS = {
    "operate_type": 3,
    "graphic_type": 3,
    "layer": 4,
    "color": 4,
    "start_angle": 9,
    "end_angle": 9,
    "width": 10,
    "start_x": 11,
    "start_y": 11,
    "radius": 10,
    "end_x": 11,
    "end_y": 11,
}


@dataclass
class GraphConfig:
    """Client UI graphic description.

    Numeric fields are truncated to their wire bit widths on assignment.
    """

    graphic_id: bytes = b"\x00\x00\x00"
    operate_type: int = 0
    graphic_type: int = 0
    layer: int = 0
    color: int = 0
    start_angle: int = 0
    end_angle: int = 0
    width: int = 0
    start_x: int = 0
    start_y: int = 0
    radius: int = 0
    end_x: int = 0
    end_y: int = 0

    def __setattr__(self, name: str, value: object) -> None:
        width = _GRAPH_BITS.get(name)
        if width is not None:
            value = int(value) & ((1 << width) - 1)  # type: ignore[arg-type]
        elif name == "graphic_id":
            value = value.encode("ascii") if isinstance(value, str) else bytes(value)  # type: ignore[arg-type]
            if len(value) != 3:
                raise ValueError("graphic_id must be exactly 3 bytes")
        super().__setattr__(name, value)

    def pack(self) -> bytes:
        word1 = (
            self.operate_type
            | self.graphic_type << 3
            | self.layer << 6
            | self.color << 10
            | self.start_angle << 14
            | self.end_angle << 23
        )
        word2 = self.width | self.start_x << 10 | self.start_y << 21
        word3 = self.radius | self.end_x << 10 | self.end_y << 21
        return _GRAPH_CONFIG.pack(self.graphic_id, word1, word2, word3)


def unpack_graph_config(data: bytes) -> GraphConfig:
    """Decode a 15-byte graphic description."""
    if len(data) < GRAPH_CONFIG_LENGTH:
        raise ValueError(f"graph config needs {GRAPH_CONFIG_LENGTH} bytes, got {len(data)}")
    graphic_id, word1, word2, word3 = _GRAPH_CONFIG.unpack_from(bytes(data))
    return GraphConfig(
        graphic_id=graphic_id,
        operate_type=word1,
        graphic_type=word1 >> 3,
        layer=word1 >> 6,
        color=word1 >> 10,
        start_angle=word1 >> 14,
        end_angle=word1 >> 23,
        width=word2,
        start_x=word2 >> 10,
        start_y=word2 >> 21,
        radius=word3,
        end_x=word3 >> 10,
        end_y=word3 >> 21,
    )


# A field is (name, struct format) for byte-aligned members or (name, bit width).
_Field = tuple[str, Union[str, int]]

_LAYOUTS: dict[RefereeCmdId, list[_Field]] = {
    RefereeCmdId.GAME_STATUS_CMD: [
        ("game_type", 4),
        ("game_progress", 4),
        ("stage_remain_time", "H"),
        ("sync_time_stamp", "Q"),
    ],
    RefereeCmdId.GAME_RESULT_CMD: [("winner", "B")],
    RefereeCmdId.GAME_ROBOT_HP_CMD: [
        (name, "H")
        for side in ("red", "blue")
        for name in (
            f"{side}_1_robot_hp",
            f"{side}_2_robot_hp",
            f"{side}_3_robot_hp",
            f"{side}_4_robot_hp",
            "reserved_1" if side == "red" else "reserved_2",
            f"{side}_7_robot_hp",
            f"{side}_outpost_hp",
            f"{side}_base_hp",
        )
    ],
    RefereeCmdId.DART_STATUS_CMD: [("dart_belong", "B"), ("stage_remaining_time", "H")],
    RefereeCmdId.ICRA_ZONE_STATUS_CMD: [
        field
        for zone in range(1, 7)
        for field in ((f"f_{zone}_zone_status", 1), (f"f_{zone}_zone_buff_debuff_status", 3))
    ]
    + [
        ("red_1_bullet_left", "H"),
        ("red_2_bullet_left", "H"),
        ("blue_1_bullet_left", "H"),
        ("blue_2_bullet_left", "H"),
    ],
    RefereeCmdId.FIELD_EVENTS_CMD: [
        ("nan_overlapping_supply_station_state", 1),
        ("overlapping_supply_station_state", 1),
        ("supplier_zone_state", 1),
        ("small_power_rune_state", 1),
        ("large_power_rune_state", 1),
        ("central_elevated_ground_state", 2),
        ("trapezoidal_elevated_ground_state", 2),
        ("be_hit_time", 9),
        ("be_hit_target", 3),
        ("central_point_state", 2),
        ("reserved", 9),
    ],
    RefereeCmdId.SUPPLY_PROJECTILE_ACTION_CMD: [
        ("reserved", "B"),
        ("supply_robot_id", "B"),
        ("supply_projectile_step", "B"),
        ("supply_projectile_num", "B"),
    ],
    RefereeCmdId.REFEREE_WARNING_CMD: [("level", "B"), ("foul_robot_id", "B"), ("count", "B")],
    RefereeCmdId.DART_INFO_CMD: [
        ("dart_remaining_time", "B"),
        ("dart_last_aim_state", 3),
        ("enemy_total_hit_received", 3),
        ("dart_current_target", 2),
        ("reserved", "B"),
    ],
    RefereeCmdId.ROBOT_STATUS_CMD: [
        ("robot_id", "B"),
        ("robot_level", "B"),
        ("remain_hp", "H"),
        ("max_hp", "H"),
        ("shooter_cooling_rate", "H"),
        ("shooter_cooling_limit", "H"),
        ("chassis_power_limit", "H"),
        ("mains_power_gimbal_output", 1),
        ("mains_power_chassis_output", 1),
        ("mains_power_shooter_output", 1),
    ],
    RefereeCmdId.POWER_HEAT_DATA_CMD: [
        ("reserved_1", "H"),
        ("reserved_2", "H"),
        ("reserved_3", "f"),
        ("chassis_power_buffer", "H"),
        ("shooter_id_1_17_mm_cooling_heat", "H"),
        ("shooter_id_2_17_mm_cooling_heat", "H"),
        ("shooter_id_1_42_mm_cooling_heat", "H"),
    ],
    RefereeCmdId.ROBOT_POS_CMD: [("x", "f"), ("y", "f"), ("yaw", "f")],
    RefereeCmdId.BUFF_CMD: [
        ("recovery_buff", "B"),
        ("cooling_buff", "B"),
        ("defence_buff", "B"),
        ("vulnerability_buff", "B"),
        ("attack_buff", "H"),
        ("remaining_energy", "B"),
    ],
    RefereeCmdId.AERIAL_ROBOT_ENERGY_CMD: [("attack_time", "B")],
    RefereeCmdId.ROBOT_HURT_CMD: [("armor_id", 4), ("hurt_type", 4)],
    RefereeCmdId.SHOOT_DATA_CMD: [
        ("bullet_type", "B"),
        ("shooter_id", "B"),
        ("bullet_freq", "B"),
        ("bullet_speed", "f"),
    ],
    RefereeCmdId.BULLET_REMAINING_CMD: [
        ("bullet_allowance_num_17_mm", "H"),
        ("bullet_allowance_num_42_mm", "H"),
        ("coin_remaining_num", "H"),
    ],
    RefereeCmdId.ROBOT_RFID_STATUS_CMD: [
        (name, 1)
        for name in (
            "base_buff_point_state",
            "own_central_elevated_ground_state",
            "enemy_central_elevated_ground_state",
            "own_trapezoidal_elevated_ground_state",
            "enemy_trapezoidal_elevated_ground_state",
            "forward_own_terrain_span_buff_point_state",
            "behind_own_terrain_span_buff_point_state",
            "forward_enemy_terrain_span_buff_point_state",
            "behind_enemy_terrain_span_buff_point_state",
            "below_central_own_terrain_span_buff_point_state",
            "upper_central_own_terrain_span_buff_point_state",
            "below_central_enemy_terrain_span_buff_point_state",
            "upper_central_enemy_terrain_span_buff_point_state",
            "below_road_own_terrain_span_buff_point_state",
            "upper_road_own_terrain_span_buff_point_state",
            "below_road_enemy_terrain_span_buff_point_state",
            "upper_road_enemy_terrain_span_buff_point_state",
            "own_fort_buff_point",
            "own_outpost_buff_point",
            "nan_overlapping_supplier_zone",
            "overlapping_supplier_zone",
            "own_large_resource_island_point",
            "enemy_large_resource_island_point",
            "central_buff_point",
        )
    ]
    + [("reversed", 8)],
    RefereeCmdId.DART_CLIENT_CMD: [
        ("dart_launch_opening_status", "B"),
        ("reversed", "B"),
        ("target_change_time", "H"),
        ("latest_launch_cmd_time", "H"),
    ],
    RefereeCmdId.ROBOTS_POS_CMD: [
        (name, "f")
        for name in (
            "hero_x",
            "hero_y",
            "engineer_x",
            "engineer_y",
            "standard_3_x",
            "standard_3_y",
            "standard_4_x",
            "standard_4_y",
            "reserved_1",
            "reserved_2",
        )
    ],
    RefereeCmdId.RADAR_MARK_CMD: [
        ("mark_hero_progress", 1),
        ("mark_engineer_progress", 1),
        ("mark_standard_3_progress", 1),
        ("mark_standard_4_progress", 1),
        ("mark_sentry_progress", 1),
    ],
    RefereeCmdId.SENTRY_INFO_CMD: [
        ("sentry_info", "I"),
        ("is_out_of_war", 1),
        ("remaining_bullets_can_supply", 11),
        ("reverse", 4),
    ],
    RefereeCmdId.INTERACTIVE_DATA_CMD: [
        ("data_cmd_id", "H"),
        ("sender_id", "H"),
        ("receiver_id", "H"),
        ("data", "B"),
    ],
    RefereeCmdId.CUSTOM_CONTROLLER_CMD: [("data", "30s")],
    RefereeCmdId.TARGET_POS_CMD: [
        ("target_position_x", "f"),
        ("target_position_y", "f"),
        ("command_keyboard", "B"),
        ("target_robot_ID", "B"),
        ("cmd_source", "B"),
    ],
    RefereeCmdId.ROBOT_COMMAND_CMD: [
        ("mouse_x", "h"),
        ("mouse_y", "h"),
        ("mouse_z", "h"),
        ("left_button_down", "b"),
        ("right_button_down", "b"),
        ("keyboard_value", "H"),
        ("reserved", "H"),
    ],
    RefereeCmdId.CLIENT_MAP_CMD: [
        (f"{robot}_position_{axis}", "H")
        for robot in ("hero", "engineer", "infantry_3", "infantry_4", "infantry_5", "sentry")
        for axis in ("x", "y")
    ],
    RefereeCmdId.MAP_SENTRY_CMD: [
        ("intention", "B"),
        ("start_position_x", "H"),
        ("start_position_y", "H"),
        ("delta_x", "49b"),
        ("delta_y", "49b"),
        ("sender_id", "H"),
    ],
    RefereeCmdId.POWER_MANAGEMENT_SAMPLE_AND_STATUS_DATA_CMD: [
        ("chassis_power_high_8_bit", "B"),
        ("chassis_power_low_8_bit", "B"),
        ("chassis_expect_power_high_8_bit", "B"),
        ("chassis_expect_power_low_8_bit", "B"),
        ("capacity_recent_charge_power_high_8_bit", "B"),
        ("capacity_recent_charge_power_low_8_bit", "B"),
        ("capacity_remain_charge_high_8_bit", "B"),
        ("capacity_remain_charge_low_8_bit", "B"),
        ("capacity_expect_charge_power", "B"),
        ("power_management_topology", 2),
        ("power_management_protection_info", 2),
        ("state_machine_running_state", 4),
    ],
    RefereeCmdId.POWER_MANAGEMENT_INITIALIZATION_EXCEPTION_CMD: [
        ("error_code", "b"),
        ("string", "31s"),
    ],
    RefereeCmdId.POWER_MANAGEMENT_SYSTEM_EXCEPTION_CMD: [
        (name, "I") for name in ("r_0", "r_1", "r_2", "r_3", "r_12", "LR", "PC", "PSR")
    ],
    RefereeCmdId.POWER_MANAGEMENT_PROCESS_STACK_OVERFLOW_CMD: [("process_name", "32s")],
    RefereeCmdId.POWER_MANAGEMENT_UNKNOWN_EXCEPTION_CMD: [
        ("abnormal_reset_reason", "B"),
        ("power_management_before_reset_topology", 4),
        ("state_machine_before_reset_mode", 4),
    ],
}


def _layout_size(layout: list[_Field]) -> int:
    bit_pos = 0
    for _, kind in layout:
        if isinstance(kind, int):
            bit_pos += kind
        else:
            bit_pos = ((bit_pos + 7) // 8 + struct.calcsize("<" + kind)) * 8
    return (bit_pos + 7) // 8


def decode_payload(cmd_id: int, payload: bytes) -> dict[str, object]:
    """Decode the payload of a referee frame with command ``cmd_id`` into named fields.

    Raises ValueError for an unknown command, a command with no fixed layout,
    or a payload shorter than the command's structure.
    """
    command = RefereeCmdId(cmd_id)
    layout = _LAYOUTS.get(command)
    if layout is None:
        raise ValueError(f"no payload layout for {command.name}")
    data = bytes(payload)
    size = _layout_size(layout)
    if len(data) < size:
        raise ValueError(f"{command.name} payload needs {size} bytes, got {len(data)}")
    bits = int.from_bytes(data[:size], "little")
    bit_pos = 0
    fields: dict[str, object] = {}
    for name, kind in layout:
        if isinstance(kind, int):
            fields[name] = (bits >> bit_pos) & ((1 << kind) - 1)
            bit_pos += kind
        else:
            offset = (bit_pos + 7) // 8
            fmt = "<" + kind
            values = struct.unpack_from(fmt, data, offset)
            fields[name] = values[0] if len(values) == 1 else values
            bit_pos = (offset + struct.calcsize(fmt)) * 8
    return fields