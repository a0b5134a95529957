"""
Helpers for console logging, configuration files and output files.
"""
import copy
import datetime
import json
import typing
from pathlib import Path

import yaml
from omegaconf import DictConfig, OmegaConf

from epideux.utils.constants import ALL_SCENARIOS, START_TIME_FORMAT


def log(str, logfile=None, timestamp=False):
    """
    Prints `str` to the console and appends it to `logfile` if one is given.

    Args:
        str (str): message
        logfile (str, optional): file to append the message to. Defaults to None.
        timestamp (bool, optional): prefix the message with the wall-clock time. Defaults to False.
    """
    if timestamp:
        str = f"[{datetime.datetime.now()}] {str}"

    print(str)
    if logfile is not None:
        with open(logfile, mode='a') as f:
            print(str, file=f)


def parse_configuration(conf):
    """
    Transforms an Omegaconf object to native python dict, parsing specific fields like
    `start_time` from its string representation.

    ANY key-specific parsing should have its inverse in epideux.utils.utils.dumps_conf()

    Args:
        conf (omegaconf.OmegaConf): Hydra-loaded configuration

    Returns:
        dict: parsed configuration to use in experiment
    """
    if isinstance(conf, (OmegaConf, DictConfig)):
        conf = OmegaConf.to_container(conf, resolve=True)
    elif not isinstance(conf, dict):
        raise ValueError("Unknown configuration type {}".format(type(conf)))

    if "start_time" in conf and isinstance(conf["start_time"], str):
        conf["start_time"] = datetime.datetime.strptime(conf["start_time"], START_TIME_FORMAT)

    assert conf.get("scenario") in ALL_SCENARIOS, f"unknown scenario {conf.get('scenario')}"
    assert conf["REPORT_INTERVAL_HOURS"] > 0, "reports need a positive interval"
    return conf


def dumps_conf(
        conf: dict,
):
    """
    Perform a deep copy of the configuration dictionary, preprocess the elements into strings
    to reverse the preprocessing performed by `parse_configuration`, returning the resulting dict.

    Args:
        conf (dict): configuration dictionary to be written in a file
    """
    copy_conf = copy.deepcopy(conf)

    if "start_time" in copy_conf:
        copy_conf["start_time"] = copy_conf["start_time"].strftime(START_TIME_FORMAT)

    return copy_conf


def dump_conf(
        conf: dict,
        path: typing.Union[str, Path],
):
    """
    Dumps the configuration into a `.yaml` file, in the format read by `parse_configuration`.

    Args:
        conf (dict): configuration dictionary to be written in a file
        path (str | Path): `.yaml` file where the configuration is written
    """
    stringified_conf = dumps_conf(conf)
    path = Path(path).resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        print("WARNING configuration already exists in {}. Overwriting.".format(
            str(path.parent)
        ))
    with path.open("w") as f:
        yaml.safe_dump(stringified_conf, f)


def dump_reports(timeline, path):
    """
    Writes the SEIR series of `timeline` to a `.json` file.

    Creates the parent directory if need be.

    Args:
        timeline (epideux.log.track.SeirTimeline): reports to write
        path (str | Path): destination file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump(timeline.as_dict(), f, indent=2)
