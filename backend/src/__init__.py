"""
后端代码根包。

定位：
- 拓扑文本格式的核心逻辑（gmxtop：词法、指令定位、monolith 拼装）放在 backend/src 下。
- 服务层（topmono_backend）只做组合与对外暴露，不直接承载格式“真值”判定逻辑。
"""
