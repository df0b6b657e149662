"""XML persistence for result trees.

The document shape is::

    <suite>
      <benchmark class="...">
        <subject name="..." description="...">
          <group name="..."/>
          <iterations>
            <parameter name="foo" value="bar"/>
            <parameter name="list" multiple="1" type="list">
              <parameter name="0" value="one"/>
            </parameter>
            <iteration revs="1" time="100"/>
          </iterations>
        </subject>
      </benchmark>
    </suite>

Nested sequences and mappings are written as `multiple="1"` parameters whose
children are keyed by index or name, with `type="list"` or `type="map"`.
Non-string scalars carry a `type` attribute too, so that every value loads
back with its original Python type.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .model import Benchmark, Iteration, IterationSet, Subject, Suite

logger = logging.getLogger(__name__)


class ResultFormatError(ValueError):
    """Raised when a result document is malformed or misses required nodes."""


# ---------------------------------------------------------------------------
# dump
# ---------------------------------------------------------------------------


def _scalar_type(value: Any) -> str | None:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    return None


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _number_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _append_parameter(parent: ET.Element, name: str, value: Any) -> None:
    el = ET.SubElement(parent, "parameter", {"name": str(name)})
    if isinstance(value, Mapping):
        el.set("multiple", "1")
        el.set("type", "map")
        for k, v in value.items():
            _append_parameter(el, str(k), v)
        return
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        el.set("multiple", "1")
        el.set("type", "list")
        for i, v in enumerate(value):
            _append_parameter(el, str(i), v)
        return

    el.set("value", _scalar_text(value))
    typ = _scalar_type(value)
    if typ is not None:
        el.set("type", typ)


def suite_to_element(suite: Suite) -> ET.Element:
    root = ET.Element("suite")
    for bench in suite.benchmarks:
        bench_el = ET.SubElement(root, "benchmark", {"class": bench.class_name})
        for subject in bench.subjects:
            subject_el = ET.SubElement(
                bench_el, "subject", {"name": subject.name, "description": subject.description}
            )
            for group in subject.groups:
                ET.SubElement(subject_el, "group", {"name": group})
            for iter_set in subject.iteration_sets:
                iters_el = ET.SubElement(subject_el, "iterations")
                for name, value in iter_set.parameters.items():
                    _append_parameter(iters_el, name, value)
                for it in iter_set.iterations:
                    attrib = {"revs": str(it.revs), "time": _number_text(it.time)}
                    for stat, stat_value in it.stats.items():
                        attrib[stat] = _number_text(stat_value)
                    ET.SubElement(iters_el, "iteration", attrib)
    return root


def dump_suite(suite: Suite) -> str:
    """Serialize a suite to an indented XML document (with declaration)."""
    root = suite_to_element(suite)
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def write_suite(path: Path, suite: Suite) -> None:
    path.write_text(dump_suite(suite), encoding="utf-8")


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


def _required_attr(el: ET.Element, name: str) -> str:
    value = el.get(name)
    if value is None:
        raise ResultFormatError(f"<{el.tag}> is missing required attribute {name!r}")
    return value


def _parse_number(text: str, *, what: str) -> int | float:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise ResultFormatError(f"Invalid numeric value for {what}: {text!r}") from None


def _typed_scalar(text: str, typ: str | None) -> Any:
    if typ is None or typ == "string":
        return text
    if typ == "null":
        return None
    if typ == "bool":
        return text not in ("", "0", "false")
    if typ == "int":
        try:
            return int(text)
        except ValueError:
            raise ResultFormatError(f"Invalid int parameter value: {text!r}") from None
    if typ == "float":
        try:
            return float(text)
        except ValueError:
            raise ResultFormatError(f"Invalid float parameter value: {text!r}") from None
    raise ResultFormatError(f"Unknown parameter type: {typ!r}")


def _load_parameter(el: ET.Element) -> Any:
    if el.get("multiple") == "1":
        children = [c for c in el if c.tag == "parameter"]
        names = [_required_attr(c, "name") for c in children]
        values = [_load_parameter(c) for c in children]
        container = el.get("type")
        if container == "list":
            return values
        if container == "map":
            return dict(zip(names, values))
        if container is not None:
            raise ResultFormatError(f"Unknown container type: {container!r}")
        # Unmarked documents: children keyed 0..n-1 in order were a sequence.
        if names == [str(i) for i in range(len(names))]:
            return values
        return dict(zip(names, values))
    return _typed_scalar(_required_attr(el, "value"), el.get("type"))


def _load_iteration(el: ET.Element) -> Iteration:
    revs = _parse_number(_required_attr(el, "revs"), what="revs")
    time = _parse_number(_required_attr(el, "time"), what="time")
    stats = {
        name: _parse_number(value, what=name) for name, value in el.attrib.items() if name not in ("revs", "time")
    }
    try:
        return Iteration(revs=revs, time=time, stats=stats)
    except ValueError as e:
        raise ResultFormatError(f"Invalid <iteration>: {e}") from e


def _load_iteration_set(el: ET.Element) -> IterationSet:
    parameters: dict[str, Any] = {}
    iterations: list[Iteration] = []
    for child in el:
        if child.tag == "parameter":
            parameters[_required_attr(child, "name")] = _load_parameter(child)
        elif child.tag == "iteration":
            iterations.append(_load_iteration(child))
    return IterationSet(iterations=iterations, parameters=parameters)


def _load_subject(el: ET.Element) -> Subject:
    groups = [_required_attr(g, "name") for g in el.findall("group")]
    sets = [_load_iteration_set(i) for i in el.findall("iterations")]
    return Subject(
        name=_required_attr(el, "name"),
        description=el.get("description", ""),
        groups=groups,
        iteration_sets=sets,
    )


def element_to_suite(root: ET.Element) -> Suite:
    if root.tag != "suite":
        raise ResultFormatError(f"Expected <suite> root element, got <{root.tag}>")
    benchmarks = []
    for bench_el in root.findall("benchmark"):
        subjects = [_load_subject(s) for s in bench_el.findall("subject")]
        benchmarks.append(Benchmark(class_name=_required_attr(bench_el, "class"), subjects=subjects))
    return Suite(benchmarks=benchmarks)


def load_suite(text: str) -> Suite:
    """Deserialize a suite from an XML document string."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ResultFormatError(f"Malformed result document: {e}") from e
    suite = element_to_suite(root)
    logger.debug("Loaded suite with %d benchmark(s)", len(suite.benchmarks))
    return suite


def read_suite(path: Path) -> Suite:
    return load_suite(path.read_text(encoding="utf-8"))
