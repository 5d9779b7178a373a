"""Static keyword tables for the Spark / Databricks SQL dialect."""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

_STATEMENTS = """
    SELECT FROM WHERE GROUP ORDER BY HAVING QUALIFY LIMIT WINDOW WITH AS ON USING
    JOIN INNER LEFT RIGHT FULL OUTER CROSS SEMI ANTI NATURAL LATERAL
    UNION INTERSECT EXCEPT ALL DISTINCT
    INSERT INTO OVERWRITE VALUES UPDATE SET DELETE MERGE MATCHED
    CASE WHEN THEN ELSE END
    CREATE OR REPLACE ALTER DROP TRUNCATE TABLE VIEW FUNCTION SCHEMA DATABASE CATALOG
    TEMPORARY TEMP IF EXISTS USE SHOW DESCRIBE EXPLAIN
    OPTIMIZE ZORDER VACUUM ANALYZE COMPUTE STATISTICS REFRESH CACHE UNCACHE MSCK REPAIR
    RESTORE CLONE SHALLOW DEEP
    PARTITION PARTITIONED PARTITIONS CLUSTER CLUSTERED DISTRIBUTE SORT BUCKETS
    TBLPROPERTIES COMMENT OPTIONS RETURNS RETURN LANGUAGE METRICS DETERMINISTIC
    CONSTRAINT PRIMARY FOREIGN REFERENCES CHECK DEFAULT GENERATED ALWAYS IDENTITY
    ADD COLUMN COLUMNS RENAME TO CHANGE OWNER GRANT REVOKE PRIVILEGES
    ASC DESC NULLS FIRST LAST ROWS RANGE UNBOUNDED PRECEDING FOLLOWING CURRENT ROW OVER
    PIVOT UNPIVOT FOR TABLESAMPLE STREAM LIVE STREAMING MATERIALIZED EXTERNAL MANAGED
    DELTA
"""

_OPERATORS = """
    AND OR NOT IN IS NULL LIKE ILIKE RLIKE REGEXP BETWEEN ANY SOME TRUE FALSE DIV
    INTERVAL ESCAPE
"""

_TYPES = """
    INT INTEGER BIGINT SMALLINT TINYINT DOUBLE FLOAT REAL DECIMAL NUMERIC
    STRING VARCHAR CHAR BOOLEAN BINARY DATE TIMESTAMP TIMESTAMP_NTZ TIMESTAMP_LTZ
    ARRAY MAP STRUCT VOID VARIANT
    YEAR MONTH DAY HOUR MINUTE SECOND
"""

_FUNCTIONS = """
    COUNT SUM AVG MIN MAX COUNT_IF ANY_VALUE APPROX_COUNT_DISTINCT PERCENTILE_APPROX
    STDDEV VARIANCE COLLECT_LIST COLLECT_SET
    COALESCE NULLIF IFNULL NVL NVL2 CAST TRY_CAST GREATEST LEAST IDENTIFIER
    CONCAT CONCAT_WS SUBSTRING SUBSTR TRIM LTRIM RTRIM UPPER LOWER INITCAP LENGTH
    REPLACE SPLIT LPAD RPAD INSTR LOCATE REGEXP_REPLACE REGEXP_EXTRACT FORMAT_NUMBER
    ROUND FLOOR CEIL CEILING ABS MD5 SHA1 SHA2 UUID
    ROW_NUMBER RANK DENSE_RANK NTILE LEAD LAG FIRST_VALUE LAST_VALUE
    ARRAY_CONTAINS EXPLODE EXPLODE_OUTER POSEXPLODE NAMED_STRUCT SEQUENCE FILTER TRANSFORM
    TO_DATE TO_TIMESTAMP DATE_FORMAT DATE_ADD DATE_SUB DATEDIFF DATE_TRUNC
    CURRENT_DATE CURRENT_TIMESTAMP NOW FROM_UNIXTIME UNIX_TIMESTAMP
    FROM_JSON TO_JSON GET_JSON_OBJECT
"""

KEYWORDS: Final[frozenset[str]] = frozenset(
    (_STATEMENTS + _OPERATORS + _TYPES + _FUNCTIONS).split()
)

# Keywords that always start a new output line. Compound entries are the
# values produced by the merge pass.
CLAUSE_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "SELECT",
        "FROM",
        "WHERE",
        "HAVING",
        "QUALIFY",
        "LIMIT",
        "WINDOW",
        "WITH",
        "VALUES",
        "SET",
        "ON",
        "USING",
        "WHEN",
        "UNION",
        "UNION ALL",
        "INTERSECT",
        "EXCEPT",
        "JOIN",
        "INNER JOIN",
        "CROSS JOIN",
        "LEFT JOIN",
        "LEFT OUTER JOIN",
        "LEFT SEMI JOIN",
        "LEFT ANTI JOIN",
        "RIGHT JOIN",
        "RIGHT OUTER JOIN",
        "FULL JOIN",
        "FULL OUTER JOIN",
        "GROUP BY",
        "ORDER BY",
        "PARTITION BY",
        "PARTITIONED BY",
        "CLUSTER BY",
        "DISTRIBUTE BY",
        "SORT BY",
        "ZORDER BY",
        "INSERT INTO",
        "INSERT OVERWRITE",
        "MERGE INTO",
        "LATERAL VIEW",
        "TBLPROPERTIES",
        "RETURNS",
        "RETURN",
        "LANGUAGE",
    }
)

# keyword -> suffix phrases it fuses with, tried in order.
MERGE_RULES: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType(
    {
        "GROUP": ("BY",),
        "ORDER": ("BY",),
        "DISTRIBUTE": ("BY",),
        "SORT": ("BY",),
        "CLUSTER": ("BY",),
        "PARTITION": ("BY",),
        "PARTITIONED": ("BY",),
        "ZORDER": ("BY",),
        "INSERT": ("INTO", "OVERWRITE"),
        "MERGE": ("INTO",),
        "LEFT": ("JOIN", "OUTER JOIN", "SEMI JOIN", "ANTI JOIN"),
        "RIGHT": ("JOIN", "OUTER JOIN"),
        "FULL": ("JOIN", "OUTER JOIN"),
        "INNER": ("JOIN",),
        "CROSS": ("JOIN",),
        "NOT": ("IN",),
        "UNION": ("ALL",),
        "LATERAL": ("VIEW",),
    }
)

CONCAT_FUNCTIONS: Final[frozenset[str]] = frozenset({"CONCAT", "CONCAT_WS"})

# Keywords followed by a parenthesised operand rather than an argument list:
# `x IN (1, 2)` keeps the space, `COUNT(*)` does not.
NON_FUNCTION_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "IN",
        "NOT IN",
        "AND",
        "OR",
        "NOT",
        "EXISTS",
        "AS",
        "THEN",
        "ELSE",
        "OVER",
        "BETWEEN",
        "IS",
        "LIKE",
        "ILIKE",
        "RLIKE",
        "ALL",
        "ANY",
        "SOME",
    }
)

DDL_KEYWORDS: Final[frozenset[str]] = frozenset({"CREATE", "ALTER", "DROP"})
