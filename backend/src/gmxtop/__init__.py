"""
TopMono 的 GROMACS 风格拓扑（.top/.itp）文本格式工具。

定位：
- 本目录放置拓扑文本格式的核心逻辑，不依赖后端服务层。
- 当前阶段主要提供：单行词法判定（注释 / 指令头 / #include / #define）、
  指令定位器（内存与流式两种模式）、以及 #include 展开后的 monolith 拼装。
"""
