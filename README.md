# portfolioreturns

Data structures for periodic investment returns: a single series of
returns, and tables of several series aligned on the same dates.

Investing carries risk, including loss of principal. Nothing this package
computes is financial advice.

The package has no dependencies outside the standard library.

## Modules

- `portfolioreturns.returnlist`: `Return`, `ReturnList` and `NoReturnsError`.
- `portfolioreturns.table`: `Table`, `ColumnGroup` and `align_tables`.
- `portfolioreturns.timeindex`: `index_of_closest` and
  `indexes_within_times`, the searches the other two modules use on
  sequences ordered newest first.

Times may be any comparable values; `datetime.date` and
`datetime.datetime` are what the CSV and JSON output expect.

## Series of returns

`Return(time, value)` is an immutable pair. A NaN value raises
`ValueError`.

`ReturnList` is a `list` of returns kept with the newest first:

```python
from datetime import date
from portfolioreturns.returnlist import Return, ReturnList

series = ReturnList([
    Return(date(2021, 6, 23), 0.01),
    Return(date(2021, 6, 25), 0.02),
    Return(date(2021, 6, 24), -0.01),
])
series.sort()                      # in place, newest first
series.first_time()                # date(2021, 6, 23), the oldest
series.last_time()                 # date(2021, 6, 25), the newest
window = series.between(date(2021, 6, 24), date(2021, 6, 23))
series.value(date(2021, 6, 24))    # -0.01, or None when there is no such return
end, start = series.end_and_start_date()
```

- `first()` and `last()` give the oldest and newest `Return`, or `None`
  for an empty list; `first_time()` and `last_time()` give their times.
- `values()` and `times()` give plain lists.
- `between(last, first)` takes the later time first and the earlier time
  second, and returns the returns inside that range as a new `ReturnList`.
  The same order is used everywhere in this package.
- `insert_return(new_return)` places a return in order, changing the list
  in place and returning it; a return at an existing time overwrites that
  return's value.
- `excess(other)` subtracts another series from this one over the range
  both cover; a date missing from `other` inside that range subtracts zero.
- `end_and_start_date()` raises `NoReturnsError` (a `ValueError`) when the
  list is empty.

## Tables

A `Table` holds columns of values that share one newest-first list of
times. Adding a column returns a new table cut down to the dates that the
table and the column share; dates missing from the new column inside that
range are filled with zero.

```python
from portfolioreturns.table import Table, align_tables

table = Table.from_lists([series_a, series_b])
table.number_of_rows(), table.number_of_columns()
table.row(date(2021, 6, 24))       # list of values, or None
table.has_row(date(2021, 6, 24))
table.time_after(date(2021, 6, 23))               # a time, or None
table.time_before(date(2021, 6, 24))              # a time, or None
table.closest_time_on_or_before(date(2021, 6, 26))

group, table = table.add_column_group([series_c, series_d])
table.column_group_lists(group)
table.column_group_values(group)
table.column_group_as_table(group)

combined, group = table.add_table(other_table)
aligned, end, start = align_tables(table_one, table_two)
```

Other members: `times()`, `list(i)`, `lists()`, `column_values()`,
`add_column(returns)`, `add_columns(lists)`, `join(other)`,
`between(last, first)`, `range_indexes(last, first)`, `first_time()`,
`last_time()`, `column_group()` and `column_group_column_index(group, i)`,
which raises `IndexError` past the last column. `end_and_start_dates()`
raises `NoReturnsError` for a table without columns.

### CSV

```python
import io

out = io.StringIO()
table.write_csv(out, ["fund a", "fund b"])
```

The header is `Date` followed by the column names. Each row starts with
its date as `YYYY-MM-DD`; values are rounded to six decimal places and
never use exponent notation. Pass `None` for the column names to get `0`,
`1` and so on; a list of the wrong length raises `ValueError`.

### JSON

`Table.to_json()` writes `{"times": [...], "values": [[...], ...]}` with
ISO-formatted times and values rounded to six places.
`Table.from_json(text)` reads it back, turning `YYYY-MM-DD` strings into
dates and longer ones into datetimes. `ColumnGroup.to_dict()` and
`ColumnGroup.from_dict(data)` do the same for a column group as
`{"index": ..., "length": ...}`.

## What the package does not do

It only stores, aligns, slices and writes out returns. It does not compute
risk, annualized or time-weighted returns, correlation matrices or the
expected risk of weighted columns, and it has no database encoding. It
has no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```