"""
任务定义加载器

将结构化的任务定义(YAML/JSON/XML 或已解析的字典)解析为任务列表和变量对,
并在执行任何任务之前完成结构校验。

定义结构:
    TaskProcess
      ImportVariables?   [ {ScriptVariable, TaskProcessVariable} ... ]
      Tasks              [ Task+ ]
        Task
          Name?           任务名称
          IntroMessage    片段
          PreConditions?  [ 片段 ... ]
          TaskSteps       [ 片段 ... ] (至少一个)
          PostConditions? [ 片段 ... ]
          ExitMessage?    片段
      ExportVariables?   [ {ScriptVariable, TaskProcessVariable} ... ]
"""

import json
import os
import textwrap
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from task_process.core.context import VariablePair
from task_process.core.errors import DefinitionError
from task_process.tasks.action import ActionUnit
from task_process.tasks.condition import ConditionGroup
from task_process.tasks.factory import FragmentFactory
from task_process.tasks.task import Task, TaskList

ROOT = 'TaskProcess'
HOST_KEY = 'ScriptVariable'
CONTEXT_KEY = 'TaskProcessVariable'

# 列表节与其子元素名称
_CHILD_KEYS = {
    'Tasks': 'Task',
    'PreConditions': 'Condition',
    'PostConditions': 'Condition',
    'TaskSteps': 'TaskStep',
    'ImportVariables': 'Variable',
    'ExportVariables': 'Variable',
}


@dataclass(frozen=True)
class TaskProcessDefinition:
    """加载完成的任务定义"""

    tasks: TaskList
    import_variables: Tuple[VariablePair, ...] = ()
    export_variables: Tuple[VariablePair, ...] = ()
    source: Optional[str] = None


def load_definition(source: Union[str, Path, Mapping[str, Any]]) -> TaskProcessDefinition:
    """
    加载并校验任务定义

    Args:
        source: 已解析的字典、YAML/JSON/XML 文本, 或定义文件路径

    Returns:
        TaskProcessDefinition

    Raises:
        DefinitionError: 定义结构不合法, 不返回任何部分结果
    """
    origin = None
    if isinstance(source, Mapping):
        document = source
    else:
        document, origin = parse_document(source)
    return build_definition(document, origin)


def parse_document(source: Union[str, Path]) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    解析定义文本或文件

    Args:
        source: 定义文本或文件路径

    Returns:
        (文档字典, 来源文件路径)
    """
    path = _as_path(source)
    if path is not None:
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise DefinitionError(f"读取定义文件失败: {e}")
        if path.suffix.lower() == '.xml':
            return _parse_xml(text), str(path)
        return _parse_yaml(text), str(path)

    text = str(source)
    if text.lstrip().startswith('<'):
        return _parse_xml(text), None
    return _parse_yaml(text), None


def build_definition(document: Mapping[str, Any], origin: Optional[str] = None) -> TaskProcessDefinition:
    """
    从文档字典构建任务定义

    Args:
        document: 文档字典
        origin: 来源描述(用于日志)

    Returns:
        TaskProcessDefinition
    """
    if not isinstance(document, Mapping):
        raise DefinitionError("定义文档必须是字典", ROOT)

    root = document
    if ROOT in document:
        root = document[ROOT]
        if not isinstance(root, Mapping):
            raise DefinitionError("必须是字典", ROOT)

    import_pairs = _build_pairs(root.get('ImportVariables'), 'ImportVariables')

    raw_tasks = _items(root.get('Tasks'), 'Tasks')
    if not raw_tasks:
        raise DefinitionError("缺少任务列表或任务列表为空", 'Tasks')

    tasks = []
    task_names = set()
    for idx, raw in enumerate(raw_tasks, 1):
        task = _build_task(raw, idx)
        if task.name in task_names:
            raise DefinitionError(f"任务名称重复: {task.name}", f"Tasks[{idx}].Name")
        task_names.add(task.name)
        tasks.append(task)

    export_pairs = _build_pairs(root.get('ExportVariables'), 'ExportVariables')

    return TaskProcessDefinition(
        tasks=TaskList(tasks),
        import_variables=tuple(import_pairs),
        export_variables=tuple(export_pairs),
        source=origin
    )


def _build_task(raw: Any, idx: int) -> Task:
    section = f"Tasks[{idx}]"
    if not isinstance(raw, Mapping):
        raise DefinitionError("任务必须是字典", section)

    name = raw.get('Name') or f"Task {idx}"

    if _is_blank(raw.get('IntroMessage')):
        raise DefinitionError("缺少 IntroMessage", f"{section}.IntroMessage")
    intro = _build_unit(raw['IntroMessage'], f"{section}.IntroMessage")

    raw_steps = _items(raw.get('TaskSteps'), 'TaskSteps', f"{section}.TaskSteps")
    if not raw_steps:
        raise DefinitionError("缺少任务步骤, 至少需要一个 TaskStep", f"{section}.TaskSteps")
    steps = [
        _build_unit(step, f"{section}.TaskSteps[{n}]")
        for n, step in enumerate(raw_steps, 1)
    ]

    pre_conditions = _build_group(raw.get('PreConditions'), 'PreConditions', section)
    post_conditions = _build_group(raw.get('PostConditions'), 'PostConditions', section)

    exit_unit = None
    if not _is_blank(raw.get('ExitMessage')):
        exit_unit = _build_unit(raw['ExitMessage'], f"{section}.ExitMessage")

    return Task(
        name=str(name),
        intro=intro,
        steps=steps,
        pre_conditions=pre_conditions,
        post_conditions=post_conditions,
        exit=exit_unit
    )


def _build_group(raw: Any, group_name: str, section: str) -> ConditionGroup:
    path = f"{section}.{group_name}"
    units = [
        _build_unit(item, f"{path}[{n}]")
        for n, item in enumerate(_items(raw, group_name, path), 1)
    ]
    return ConditionGroup(group_name, units)


def _build_unit(raw: Any, name: str) -> ActionUnit:
    if _is_blank(raw):
        raise DefinitionError("片段为空", name)
    return ActionUnit(name, FragmentFactory.create(raw, name))


def _build_pairs(raw: Any, section: str) -> List[VariablePair]:
    pairs = []
    for n, item in enumerate(_items(raw, section), 1):
        path = f"{section}[{n}]"
        if not isinstance(item, Mapping):
            raise DefinitionError(f"变量对必须包含 {HOST_KEY} 和 {CONTEXT_KEY}", path)
        host_name = item.get(HOST_KEY)
        context_name = item.get(CONTEXT_KEY)
        for key, value in ((HOST_KEY, host_name), (CONTEXT_KEY, context_name)):
            if not isinstance(value, str) or not value.strip():
                raise DefinitionError(f"{key} 不能为空", path)
        pairs.append(VariablePair(host_name.strip(), context_name.strip()))
    return pairs


def _items(raw: Any, section: str, path: Optional[str] = None) -> List[Any]:
    """将列表节规范化为列表, 支持 {Task: [...]} 这种带子元素名的写法"""
    path = path or section
    if raw is None or raw == '':
        return []
    if isinstance(raw, list):
        return raw

    child_key = _CHILD_KEYS.get(section)
    if isinstance(raw, Mapping) and child_key in raw:
        child = raw[child_key]
        if child is None:
            return []
        return child if isinstance(child, list) else [child]

    # 单个片段可以直接写成字符串或片段字典
    if section in ('TaskSteps', 'PreConditions', 'PostConditions') and (
            isinstance(raw, str) or (isinstance(raw, Mapping) and 'type' in raw)):
        return [raw]

    raise DefinitionError(f"必须是列表, 实际为: {type(raw).__name__}", path)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _as_path(source: Union[str, Path]) -> Optional[Path]:
    if isinstance(source, Path):
        return source
    if '\n' in source or len(source) > 4096:
        return None
    if os.path.isfile(source):
        return Path(source)
    if Path(source).suffix.lower() in ('.yaml', '.yml', '.json', '.xml'):
        raise DefinitionError(f"定义文件不存在: {source}")
    return None


def _parse_yaml(text: str) -> Dict[str, Any]:
    # JSON 是 YAML 的子集, 这里统一用 yaml 解析
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DefinitionError(f"定义文档格式错误: {e}")
    if not isinstance(document, dict):
        raise DefinitionError("定义文档必须是字典", ROOT)
    return document


def _parse_xml(text: str) -> Dict[str, Any]:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise DefinitionError(f"XML 定义格式错误: {e}")

    if root.tag != ROOT:
        raise DefinitionError(f"根元素必须是 {ROOT}, 实际为: {root.tag}", ROOT)

    document: Dict[str, Any] = {}
    for child in root:
        if child.tag in ('ImportVariables', 'ExportVariables'):
            document[child.tag] = [_xml_pair(item) for item in child]
        elif child.tag == 'Tasks':
            document['Tasks'] = [_xml_task(item) for item in child if item.tag == 'Task']
    return {ROOT: document}


def _xml_task(element: ET.Element) -> Dict[str, Any]:
    task: Dict[str, Any] = {}
    if element.get('Name'):
        task['Name'] = element.get('Name')
    for child in element:
        if child.tag in ('IntroMessage', 'ExitMessage'):
            task[child.tag] = _xml_fragment(child)
        elif child.tag in ('PreConditions', 'PostConditions', 'TaskSteps'):
            task[child.tag] = [_xml_fragment(item) for item in child]
    return task


def _xml_fragment(element: ET.Element) -> Any:
    text = textwrap.dedent(element.text or '').strip()
    if not text:
        return None
    config: Dict[str, Any] = dict(element.attrib)
    fragment_type = config.setdefault('type', FragmentFactory.DEFAULT_TYPE)
    config[FragmentFactory.source_key(fragment_type)] = text
    return config


def _xml_pair(element: ET.Element) -> Dict[str, Any]:
    pair = {key: element.get(key) for key in (HOST_KEY, CONTEXT_KEY) if element.get(key)}
    for child in element:
        if child.tag in (HOST_KEY, CONTEXT_KEY) and child.text:
            pair[child.tag] = child.text.strip()
    return pair


def dump_definition(definition: TaskProcessDefinition) -> str:
    """
    以 JSON 输出定义摘要(任务名称和变量对), 用于 --validate-only

    Args:
        definition: 任务定义

    Returns:
        JSON 字符串
    """
    summary = {
        'tasks': [
            {
                'name': task.name,
                'pre_conditions': len(task.pre_conditions),
                'steps': len(task.steps),
                'post_conditions': len(task.post_conditions),
                'exit_message': task.exit is not None,
            }
            for task in definition.tasks
        ],
        'import_variables': [[p.host_name, p.context_name] for p in definition.import_variables],
        'export_variables': [[p.host_name, p.context_name] for p in definition.export_variables],
    }
    return json.dumps(summary, indent=2, ensure_ascii=False)
