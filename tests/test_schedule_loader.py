import pytest

import gameplay_models
import schedule_loader

HEADER = "user_played,instrument_name,velocity,pitch,start,end"


def test_load_schedule_file(tmp_path) -> None:
    schedule_path = tmp_path / "song.csv"
    schedule_path.write_text(
        "\n".join([HEADER, "True,piano,90,60,2.0,2.3", "False,violin,64,65,2.5,4.0", "TRUE,flute,80,70,3,3"]),
        encoding="utf-8",
    )
    notes = schedule_loader.load_schedule_file(schedule_path)

    assert [note.pitch for note in notes] == [60, 65, 70]
    assert [note.is_player_note for note in notes] == [True, False, True]
    assert notes[1].lane == 1 and notes[1].input_key is gameplay_models.KeyId.KEY_J
    assert notes[2].end_time_seconds == notes[2].start_time_seconds


def test_missing_file_raises_load_error(tmp_path) -> None:
    with pytest.raises(schedule_loader.ScheduleLoadError):
        schedule_loader.load_schedule_file(tmp_path / "missing.csv")


@pytest.mark.parametrize(
    "row",
    [
        "True,piano,90,60,2.0",
        "True,piano,90,sixty,2.0,2.3",
        "True,piano,90,60,-0.5,2.3",
        "True,piano,90,60,2.5,2.3",
        "True,piano,90,-1,2.0,2.3",
        "True,piano,90,inf,1.0,2.0",
        "True,piano,inf,60,1.0,2.0",
        "True,piano,90,60,nan,2.0",
        "True,piano,90,60,1.0,nan",
        "True,piano,90,60.5,1.0,2.0",
        "True,piano,90.5,60,1.0,2.0",
        "True,piano,90,60,-inf,2.0",
    ],
)
def test_malformed_row_aborts_load(row) -> None:
    with pytest.raises(schedule_loader.ScheduleLoadError) as exc_info:
        schedule_loader.parse_schedule_text("\n".join([HEADER, "True,piano,90,60,1.0,1.2", row]), source_name="song.csv")
    assert "song.csv:3" in str(exc_info.value)


def test_header_only_schedule_is_empty() -> None:
    assert schedule_loader.parse_schedule_text(HEADER + "\n") == []


def test_integral_float_cells_are_accepted() -> None:
    notes = schedule_loader.parse_schedule_text("\n".join([HEADER, "True,piano,90.0,61.0,1.0,2.0"]))
    assert notes[0].pitch == 61 and notes[0].velocity == 90
    assert notes[0].lane == 1
