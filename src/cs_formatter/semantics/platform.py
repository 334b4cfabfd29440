"""
Platform Type Catalog.

A static description of the base class library types the semantic model knows
about, keyed by namespace. Names are metadata names: generic types carry their
arity suffix (``List`1``).
"""

from typing import Dict, FrozenSet, Iterable, Set

PLATFORM_ROOT_NAMESPACE = "System"

PLATFORM_TYPES: Dict[str, FrozenSet[str]] = {
  "System": frozenset(
    {
      # Types with a keyword alias.
      "Boolean",
      "Byte",
      "SByte",
      "Char",
      "Decimal",
      "Double",
      "Single",
      "Int32",
      "UInt32",
      "Int64",
      "UInt64",
      "Int16",
      "UInt16",
      "Object",
      "String",
      "Void",
      # Everything else.
      "Action",
      "Action`1",
      "Action`2",
      "Action`3",
      "Activator",
      "ArgumentException",
      "ArgumentNullException",
      "ArgumentOutOfRangeException",
      "Array",
      "Attribute",
      "AttributeUsageAttribute",
      "BitConverter",
      "Buffer",
      "Console",
      "Convert",
      "DateTime",
      "DateTimeOffset",
      "DayOfWeek",
      "DBNull",
      "Delegate",
      "Enum",
      "Environment",
      "EventArgs",
      "EventHandler",
      "EventHandler`1",
      "Exception",
      "FlagsAttribute",
      "FormatException",
      "Func`1",
      "Func`2",
      "Func`3",
      "Func`4",
      "GC",
      "Guid",
      "Half",
      "IAsyncDisposable",
      "ICloneable",
      "IComparable",
      "IComparable`1",
      "IDisposable",
      "IEquatable`1",
      "IFormattable",
      "IntPtr",
      "Int128",
      "InvalidCastException",
      "InvalidOperationException",
      "Lazy`1",
      "Math",
      "Memory`1",
      "NotImplementedException",
      "NotSupportedException",
      "Nullable`1",
      "NullReferenceException",
      "ObjectDisposedException",
      "ObsoleteAttribute",
      "OperationCanceledException",
      "Random",
      "ReadOnlyMemory`1",
      "ReadOnlySpan`1",
      "SerializableAttribute",
      "Span`1",
      "StringComparer",
      "StringComparison",
      "TimeSpan",
      "Tuple`2",
      "Tuple`3",
      "Type",
      "UInt128",
      "UIntPtr",
      "Uri",
      "ValueTuple`2",
      "ValueTuple`3",
      "ValueType",
      "Version",
      "WeakReference`1",
    }
  ),
  "System.Collections": frozenset(
    {
      "ArrayList",
      "BitArray",
      "Hashtable",
      "ICollection",
      "IComparer",
      "IDictionary",
      "IEnumerable",
      "IEnumerator",
      "IEqualityComparer",
      "IList",
      "Queue",
      "Stack",
    }
  ),
  "System.Collections.Generic": frozenset(
    {
      "Comparer`1",
      "Dictionary`2",
      "EqualityComparer`1",
      "HashSet`1",
      "ICollection`1",
      "IComparer`1",
      "IDictionary`2",
      "IEnumerable`1",
      "IEnumerator`1",
      "IEqualityComparer`1",
      "IList`1",
      "IReadOnlyCollection`1",
      "IReadOnlyDictionary`2",
      "IReadOnlyList`1",
      "ISet`1",
      "KeyValuePair`2",
      "LinkedList`1",
      "List`1",
      "Queue`1",
      "SortedDictionary`2",
      "SortedList`2",
      "SortedSet`1",
      "Stack`1",
    }
  ),
  "System.Collections.Concurrent": frozenset({"ConcurrentBag`1", "ConcurrentDictionary`2", "ConcurrentQueue`1", "ConcurrentStack`1"}),
  "System.Diagnostics": frozenset({"Debug", "Debugger", "Process", "Stopwatch", "Trace"}),
  "System.Globalization": frozenset({"CultureInfo", "NumberStyles"}),
  "System.IO": frozenset(
    {
      "BinaryReader",
      "BinaryWriter",
      "Directory",
      "DirectoryInfo",
      "File",
      "FileInfo",
      "FileMode",
      "FileStream",
      "IOException",
      "MemoryStream",
      "Path",
      "Stream",
      "StreamReader",
      "StreamWriter",
      "StringReader",
      "StringWriter",
      "TextReader",
      "TextWriter",
    }
  ),
  "System.Linq": frozenset({"Enumerable", "IGrouping`2", "ILookup`2", "IOrderedEnumerable`1", "IQueryable`1", "Queryable"}),
  "System.Reflection": frozenset({"Assembly", "BindingFlags", "FieldInfo", "MemberInfo", "MethodInfo", "PropertyInfo"}),
  "System.Runtime.CompilerServices": frozenset({"CallerMemberNameAttribute", "InternalsVisibleToAttribute", "MethodImplAttribute"}),
  "System.Text": frozenset({"Encoding", "StringBuilder"}),
  "System.Text.RegularExpressions": frozenset({"Match", "Regex", "RegexOptions"}),
  "System.Threading": frozenset({"CancellationToken", "CancellationTokenSource", "Interlocked", "Monitor", "Mutex", "SemaphoreSlim", "Thread", "Timer"}),
  "System.Threading.Tasks": frozenset({"Parallel", "Task", "Task`1", "TaskCompletionSource`1", "ValueTask", "ValueTask`1"}),
}


def namespace_closure(names: Iterable[str]) -> Set[str]:
  """
  Expands dotted namespace names with all their prefixes.

  Args:
      names: Fully qualified namespace names.

  Returns:
      Set[str]: e.g. {'System', 'System.IO'} for ['System.IO'].
  """
  result: Set[str] = set()
  for name in names:
    parts = name.split(".")
    for i in range(1, len(parts) + 1):
      result.add(".".join(parts[:i]))
  return result
